"""Check-digit validation for CPF and CNPJ tax identifiers."""

from __future__ import annotations

import re

from agenda.common.constants import CNPJ_SECOND_DIGIT_SPAN, CNPJ_SECOND_DIGIT_SPANS

_NON_DIGIT_RE = re.compile(r"\D")

CPF_LENGTH = 11
CNPJ_LENGTH = 14


def only_digits(raw: object) -> str:
    if not isinstance(raw, (str, int)) or isinstance(raw, bool):
        return ""
    return _NON_DIGIT_RE.sub("", str(raw))


def _mod11_digit(total: int) -> int:
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _is_repeated(digits: str) -> bool:
    return len(set(digits)) == 1


def _cpf_digit(digits: str, start_weight: int, length: int) -> int:
    total = sum(int(digits[i]) * (start_weight - i) for i in range(length))
    return _mod11_digit(total)


def _cnpj_digit(digits: str, start_weight: int, length: int) -> int:
    # Weights run start..2 and then wrap to 9..2.
    total = 0
    weight = start_weight
    for char in digits[:length]:
        total += int(char) * weight
        weight = 9 if weight == 2 else weight - 1
    return _mod11_digit(total)


def cpf_check_digits(base: str) -> str:
    """Return the two check digits for the first nine CPF digits."""
    digits = only_digits(base)[:9]
    if len(digits) != 9:
        raise ValueError("CPF base must have 9 digits")
    first = _cpf_digit(digits, 10, 9)
    second = _cpf_digit(f"{digits}{first}", 11, 10)
    return f"{first}{second}"


def _check_span(second_digit_span: int) -> None:
    if second_digit_span not in CNPJ_SECOND_DIGIT_SPANS:
        raise ValueError(f"Unsupported CNPJ second digit span: {second_digit_span}")


def cnpj_check_digits(base: str, second_digit_span: int = CNPJ_SECOND_DIGIT_SPAN) -> str:
    """Return the two check digits for the first twelve CNPJ digits.

    ``second_digit_span`` is the number of leading digits weighted into the
    second check digit: 12 leaves the first check digit out, 13 includes it.
    """
    _check_span(second_digit_span)
    digits = only_digits(base)[:12]
    if len(digits) != 12:
        raise ValueError("CNPJ base must have 12 digits")
    first = _cnpj_digit(digits, 5, 12)
    second = _cnpj_digit(f"{digits}{first}", 6, second_digit_span)
    return f"{first}{second}"


def is_valid_cpf(raw: object) -> bool:
    digits = only_digits(raw)
    if len(digits) != CPF_LENGTH or _is_repeated(digits):
        return False
    return (
        _cpf_digit(digits, 10, 9) == int(digits[9])
        and _cpf_digit(digits, 11, 10) == int(digits[10])
    )


def is_valid_cnpj(raw: object, second_digit_span: int = CNPJ_SECOND_DIGIT_SPAN) -> bool:
    _check_span(second_digit_span)
    digits = only_digits(raw)
    if len(digits) != CNPJ_LENGTH or _is_repeated(digits):
        return False
    return (
        _cnpj_digit(digits, 5, 12) == int(digits[12])
        and _cnpj_digit(digits, 6, second_digit_span) == int(digits[13])
    )


_VALIDATORS = {
    "individual": is_valid_cpf,
    "cpf": is_valid_cpf,
    "organization": is_valid_cnpj,
    "cnpj": is_valid_cnpj,
}


def checksum_valid(kind: str, raw: object) -> bool:
    try:
        validator = _VALIDATORS[kind]
    except KeyError:
        raise ValueError(f"Unknown identifier kind: {kind}") from None
    return validator(raw)
