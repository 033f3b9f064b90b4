import pytest

from chatgate.urlcodec import split_target, url_decode, url_encode


def test_encode_keeps_unreserved():
    assert url_encode("abcXYZ019-_.~") == "abcXYZ019-_.~"


def test_encode_space_as_plus():
    assert url_encode("a b") == "a+b"


def test_encode_utf8_uppercase_hex():
    assert url_encode("é") == "%C3%A9"


def test_encode_reserved_characters():
    assert url_encode("a=b&c") == "a%3Db%26c"


@pytest.mark.parametrize(
    "text",
    ["", "plain", "with space", "user@example.com", "中文 & symbols/?#%+", "~tilde"],
)
def test_round_trip(text):
    assert url_decode(url_encode(text)) == text


def test_decode_plus_and_lowercase_hex():
    assert url_decode("a+b%2fc") == "a b/c"


def test_decode_leaves_other_characters():
    assert url_decode("abc-def") == "abc-def"


@pytest.mark.parametrize("bad", ["%", "%4", "abc%", "x%zz", "%G0"])
def test_decode_rejects_bad_escapes(bad):
    with pytest.raises(ValueError):
        url_decode(bad)


def test_split_target_without_query():
    assert split_target("/get_test") == ("/get_test", {})


def test_split_target_with_params():
    path, params = split_target("/get_test?key1=value1&key2=value2")
    assert path == "/get_test"
    assert params == {"key1": "value1", "key2": "value2"}


def test_split_target_decodes_and_skips_bare_pieces():
    path, params = split_target("/p?na+me=a%20b&flag&x=1=2&")
    assert path == "/p"
    assert params == {"na me": "a b", "x": "1=2"}


def test_split_target_later_key_wins():
    _, params = split_target("/p?k=1&k=2")
    assert params == {"k": "2"}


def test_split_target_empty_query():
    assert split_target("/p?") == ("/p", {})