from src.utils.dn_parser import parse_distinguished_name, common_name


def test_quoted_and_escaped_commas_are_not_separators():
    dn = 'CN=Example\\, Inc.,O="Ex, Corp",C=US'
    assert parse_distinguished_name(dn) == [
        ("CN", "Example, Inc."),
        ("O", "Ex, Corp"),
        ("C", "US"),
    ]


def test_whitespace_is_trimmed():
    assert parse_distinguished_name(" CN = a.example , O = Org ") == [("CN", "a.example"), ("O", "Org")]


def test_segments_without_equals_are_dropped():
    assert parse_distinguished_name("CN=a.example,garbage,C=US") == [("CN", "a.example"), ("C", "US")]


def test_split_on_first_equals_only():
    assert parse_distinguished_name("OU=a=b,CN=x") == [("OU", "a=b"), ("CN", "x")]


def test_empty_input():
    assert parse_distinguished_name("") == []
    assert parse_distinguished_name(None) == []


def test_common_name():
    assert common_name('O="Ex, Corp",CN=www.example.com') == "www.example.com"
    assert common_name("O=No Common Name") is None
