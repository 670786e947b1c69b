from agenda.cli import main, parse_args


def test_parse_args_defaults():
    args = parse_args(["list"])
    assert args.command == "list"
    assert args.kind == "individual"
    assert args.overlay_config_dir is None
    assert args.store is None


def test_parse_args_accepts_overlay_config_dir():
    args = parse_args(["show", "52998224725", "--overlay-config-dir", "config/live"])
    assert args.value == "52998224725"
    assert args.overlay_config_dir == "config/live"


def test_check_id_exit_codes(capsys):
    assert main(["check-id", "529.982.247-25"]) == 0
    assert '"valid": true' in capsys.readouterr().out
    assert main(["check-id", "11.222.333/0001-82", "--kind", "organization"]) == 10
    assert main(["check-id"]) == 20
