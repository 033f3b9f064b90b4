import json

import pytest

from chatgate.constants import ErrorCode
from chatgate.gateway import LogicSystem, Request, Response, build_logic


def _post(logic, path, body):
    response = Response()
    found = logic.handle_post(path, Request("POST", path, body=body), response)
    return found, response


def test_unknown_paths_are_not_handled():
    logic = LogicSystem()
    response = Response()
    assert logic.handle_get("/nothing", Request("GET", "/nothing"), response) is False
    assert logic.handle_post("/nothing", Request("POST", "/nothing"), response) is False
    assert response.text == ""


def test_registered_handler_runs():
    logic = LogicSystem()
    logic.reg_get("/echo", lambda req, resp: resp.write(req.params["name"]))
    response = Response()
    request = Request.from_target("GET", "/echo?name=a+b")
    assert logic.handle_get(request.path, request, response) is True
    assert response.text == "a b"


def test_first_registration_wins():
    logic = LogicSystem()
    logic.reg_post("/x", lambda req, resp: resp.write("first"))
    logic.reg_post("/x", lambda req, resp: resp.write("second"))
    response = Response()
    assert logic.handle_post("/x", Request("POST", "/x"), response)
    assert response.text == "first"


def test_get_and_post_tables_are_separate():
    logic = LogicSystem()
    logic.reg_get("/only_get", lambda req, resp: resp.write("x"))
    assert logic.handle_post("/only_get", Request("POST", "/only_get"), Response()) is False


def test_get_test_lists_sorted_params():
    logic = build_logic(lambda email: 0)
    request = Request.from_target("GET", "/get_test?key2=value2&key1=value1")
    response = Response()
    assert logic.handle_get(request.path, request, response)
    assert response.text == (
        "receive get_test req \n"
        "param1 key is key1,  value is value1\n"
        "param2 key is key2,  value is value2\n"
    )


def test_get_test_without_params():
    logic = build_logic(lambda email: 0)
    request = Request.from_target("GET", "/get_test")
    response = Response()
    logic.handle_get(request.path, request, response)
    assert response.text == "receive get_test req \n"


def test_varifycode_success_echoes_email():
    seen = []

    def verifier(email):
        seen.append(email)
        return ErrorCode.SUCCESS

    logic = build_logic(verifier)
    found, response = _post(
        logic, "/get_varifycode", json.dumps({"email": "user@example.com"}).encode()
    )
    assert found
    assert seen == ["user@example.com"]
    assert response.headers["Content-Type"] == "text/json"
    assert json.loads(response.text) == {"error": 0, "email": "user@example.com"}


def test_varifycode_styled_output():
    logic = build_logic(lambda email: 0)
    _, response = _post(logic, "/get_varifycode", b'{"email": "user@example.com"}')
    assert response.text == '{\n   "email" : "user@example.com",\n   "error" : 0\n}\n'


def test_varifycode_passes_verifier_error():
    logic = build_logic(lambda email: ErrorCode.RPC_FAILED)
    _, response = _post(logic, "/get_varifycode", b'{"email": "user@example.com"}')
    assert json.loads(response.text)["error"] == ErrorCode.RPC_FAILED


def test_varifycode_connection_failure_is_rpc_failed():
    def verifier(email):
        raise ConnectionError("down")

    logic = build_logic(verifier)
    _, response = _post(logic, "/get_varifycode", b'{"email": "user@example.com"}')
    assert json.loads(response.text)["error"] == ErrorCode.RPC_FAILED


@pytest.mark.parametrize("body", [b"not json", b"", b"[1, 2]", b'{"user": "x"}'])
def test_varifycode_bad_body_is_json_error(body):
    calls = []
    logic = build_logic(lambda email: calls.append(email) or 0)
    found, response = _post(logic, "/get_varifycode", body)
    assert found
    assert json.loads(response.text) == {"error": ErrorCode.ERROR_JSON}
    assert calls == []


def test_varifycode_numeric_email_is_stringified_for_verifier():
    seen = []
    logic = build_logic(lambda email: seen.append(email) or 0)
    _, response = _post(logic, "/get_varifycode", b'{"email": 42}')
    assert seen == ["42"]
    assert json.loads(response.text)["email"] == 42


def test_response_content_is_utf8_of_text():
    response = Response()
    response.write("a")
    response.write("é")
    assert response.content == "aé".encode("utf-8")