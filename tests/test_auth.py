import pytest

from semantria import auth
from semantria.auth import AuthRequest, Credentials, encode_uri_component

URL = "https://api30.semantria.com/document.json"
TIMESTAMP = 1700000000000
NONCE = 1234567

# Produced by the service's reference JavaScript SDK for the same inputs
EXPECTED_HEADER = (
    'OAuth,oauth_version="1.0",oauth_signature_method="HMAC-SHA1",'
    'oauth_nonce="1234567",oauth_consumer_key="key",'
    'oauth_timestamp="1700000000000",'
    'oauth_signature="YG74vcICIK11tDAst%2BAy2J43BSM%3D"'
)


@pytest.fixture
def signer():
    return AuthRequest(Credentials.create("key", "secret"))


def _signature(header: str) -> str:
    return header.rsplit("oauth_signature=", 1)[1]


@pytest.mark.parametrize(
    "application_name, expected",
    [("test", "test/"), ("", ""), (None, "")],
)
def test_credentials_application_name(application_name, expected):
    creds = Credentials.create("", "", application_name, False)
    assert creds.application_name == expected


@pytest.mark.parametrize(
    "use_compression, expected",
    [(True, "gzip, deflate"), (False, "identity")],
)
def test_credentials_accept_encoding(use_compression, expected):
    creds = Credentials.create("", "", "", use_compression)
    assert creds.accept_encoding == expected


def test_credentials_are_immutable():
    creds = Credentials.create("key", "secret")
    with pytest.raises(AttributeError):
        creds.consumer_secret = "other"


def test_generate_nonce_range(mocker, signer):
    randrange = mocker.patch("semantria.auth.random.randrange", return_value=7)

    assert signer.generate_nonce() == 7
    randrange.assert_called_once_with(9999999)


def test_generate_nonce_is_int_in_bounds(signer):
    for _ in range(100):
        nonce = signer.generate_nonce()
        assert isinstance(nonce, int)
        assert 0 <= nonce < auth.NONCE_LIMIT


def test_generate_timestamp_is_milliseconds(mocker, signer):
    mocker.patch("semantria.auth.time.time", return_value=1700000000.5)
    assert signer.generate_timestamp() == 1700000000500


def test_get_normalized_parameters():
    signer = AuthRequest(Credentials.create("", ""))
    expected = (
        "oauth_consumer_key=&oauth_nonce=1&oauth_signature_method=HMAC-SHA1"
        "&oauth_timestamp=42&oauth_version=1.0"
    )
    assert signer.get_normalized_parameters(42, "1") == expected


def test_generate_query_without_existing_params(mocker, signer):
    mocker.patch.object(signer, "get_normalized_parameters", return_value="mockParams")
    assert signer.generate_query("", "mockUrl", "", "") == "mockUrl?mockParams"


def test_generate_query_with_existing_params(mocker, signer):
    mocker.patch.object(signer, "get_normalized_parameters", return_value="mockParams")
    assert signer.generate_query("", "mockUrl?=test", "", "") == "mockUrl?=test&mockParams"


def test_generate_query_full_url(signer):
    assert signer.generate_query("GET", "http://x/y", 1, 2).startswith(
        "http://x/y?oauth_consumer_key=key&"
    )
    assert signer.generate_query("GET", "http://x/y?a=1", 1, 2).startswith(
        "http://x/y?a=1&oauth_consumer_key=key&"
    )


def test_generate_auth_header_matches_reference_sdk(signer):
    query = signer.generate_query("POST", URL, TIMESTAMP, NONCE)
    assert signer.generate_auth_header(query, TIMESTAMP, NONCE) == EXPECTED_HEADER


def test_generate_auth_header_is_deterministic(signer):
    query = signer.generate_query("GET", URL, TIMESTAMP, NONCE)
    first = signer.generate_auth_header(query, TIMESTAMP, NONCE)
    second = signer.generate_auth_header(query, TIMESTAMP, NONCE)
    assert first == second


@pytest.mark.parametrize(
    "url, timestamp, nonce, secret",
    [
        (URL + "?x=1", TIMESTAMP, NONCE, "secret"),
        (URL, TIMESTAMP + 1, NONCE, "secret"),
        (URL, TIMESTAMP, NONCE + 1, "secret"),
        (URL, TIMESTAMP, NONCE, "other-secret"),
    ],
)
def test_signature_changes_with_any_input(url, timestamp, nonce, secret):
    baseline = AuthRequest(Credentials.create("key", "secret"))
    base_query = baseline.generate_query("GET", URL, TIMESTAMP, NONCE)
    base_header = baseline.generate_auth_header(base_query, TIMESTAMP, NONCE)

    changed = AuthRequest(Credentials.create("key", secret))
    query = changed.generate_query("GET", url, timestamp, nonce)
    header = changed.generate_auth_header(query, timestamp, nonce)

    assert _signature(header) != _signature(base_header)


def test_generate_auth_header_uses_md5_of_secret_as_hmac_key(mocker, signer):
    hmac_new = mocker.patch("semantria.auth.hmac.new")
    hmac_new.return_value.digest.return_value = b"\xff\xfe"

    header = signer.generate_auth_header("q", "", "")

    key, message, digestmod = hmac_new.call_args.args
    assert key == b"5ebe2294ecd0e0f08eab7690d2a6ee69"
    assert message == b"q"
    assert digestmod is auth.hashlib.sha1
    # base64 "//4=" percent-encoded once
    assert header.endswith('oauth_signature="%2F%2F4%3D"')


def test_generate_auth_header_field_layout(mocker):
    signer = AuthRequest(Credentials.create("", ""))
    mocker.patch("semantria.auth.encode_uri_component", side_effect=lambda v: "whaaaaa")

    expected = (
        'OAuth,oauth_version="1.0",oauth_signature_method="HMAC-SHA1",'
        'oauth_nonce="",oauth_consumer_key="",oauth_timestamp="",'
        'oauth_signature="whaaaaa"'
    )
    assert signer.generate_auth_header("", "", "") == expected


def test_get_request_headers_get(mocker):
    signer = AuthRequest(Credentials.create("", "", "", False))
    mocker.patch.object(signer, "generate_auth_header", return_value="mockAuthHeader")

    assert signer.get_request_headers("GET", "", "", "") == {
        "Authorization": "mockAuthHeader",
        "x-app-name": "",
        "Accept-Encoding": "identity",
    }


def test_get_request_headers_post(mocker):
    signer = AuthRequest(Credentials.create("", "", "app", True))
    mocker.patch.object(signer, "generate_auth_header", return_value="mockAuthHeader")

    assert signer.get_request_headers("POST", "", "", "") == {
        "Authorization": "mockAuthHeader",
        "Content-type": "application/x-www-form-urlencoded",
        "x-app-name": "app/",
        "Accept-Encoding": "gzip, deflate",
    }


def test_encode_uri_component_matches_javascript():
    assert encode_uri_component("a b/é!~*'()") == "a%20b%2F%C3%A9!~*'()"
    assert encode_uri_component("x=1&y=+") == "x%3D1%26y%3D%2B"
