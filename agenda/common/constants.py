"""Application constants."""

USER_AGENT = "agenda/1.0 (+party-records; contact: configured-email)"

KINDS = ("individual", "organization")

REGION_CODES = (
    "11", "12", "13", "14", "15", "16", "17", "18", "19", "21", "22", "24", "27", "28",
    "31", "32", "33", "34", "35", "37", "38", "41", "42", "43", "44", "45", "46", "47",
    "48", "49", "51", "53", "54", "55", "61", "62", "63", "64", "65", "66", "67", "68",
    "69", "71", "73", "74", "75", "77", "79", "81", "82", "83", "84", "85", "86", "87",
    "88", "89", "91", "92", "93", "94", "95", "96", "97", "98", "99",
)
BLOCKED_EMAIL_DOMAINS = ("yopmail.com", "mailinator.com", "tempmail.com", "10minutemail.com")
BIRTH_DATE_FORMAT = "%Y-%m-%d"
# How many leading digits feed the second CNPJ check digit: 12 (the registry's
# historical records) or 13 (the first check digit included).
CNPJ_SECOND_DIGIT_SPANS = (12, 13)
CNPJ_SECOND_DIGIT_SPAN = 12

MSG_INVALID_CPF = "CPF inválido"
MSG_INVALID_CNPJ = "CNPJ inválido"
MSG_INVALID_EMAIL = "E-mail inválido"
MSG_INVALID_DATE = "Data inválida"
MSG_INVALID_CEP = "CEP inválido"
MSG_INVALID_PHONE = "Telefone inválido"
MSG_INVALID_ADDRESS = "Endereço inválido"
MSG_INVALID_NAME = "Nome inválido"
MSG_INVALID_LEGAL_NAME = "Razão Social inválida"
MSG_INVALID_TRADE_NAME = "Nome Fantasia inválido"

MSG_CPF_TAKEN = "CPF já cadastrado"
MSG_CNPJ_TAKEN = "CNPJ já cadastrado"
MSG_EMAIL_TAKEN = "E-mail já cadastrado"
MSG_COORDINATES_UNAVAILABLE = "Não foi possível obter as coordenadas para este CEP"

MSG_INDIVIDUAL_NOT_FOUND = "Usuário não encontrado"
MSG_ORGANIZATION_NOT_FOUND = "Pessoa jurídica não encontrada"

GEOCODE_ACTIONS = ("skip", "reject", "raise")
GEOCODE_POLICY_NAMES = ("individual_create", "organization_create", "update")

EXIT_SUCCESS = 0
EXIT_REJECTED = 10
EXIT_HARD_FAIL = 20

JSON_LOG_FIELDS = (
    "timestamp",
    "operation",
    "kind",
    "record_id",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "error_code",
    "message",
)
