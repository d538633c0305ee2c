import unittest
from unittest.mock import MagicMock, patch

import requests

from vas_cli.core.api import api_request_token, api_validate_token
from vas_cli.core.config import BASE_URL


class TestCLIApi(unittest.TestCase):

    @patch("vas_cli.core.api.requests.post")
    def test_request_token(self, mock_post):
        mock_post.return_value = MagicMock(status_code=200, json=MagicMock(return_value={"success": True}))

        result = api_request_token({"clientId": "A"})
        self.assertEqual(result, (200, {"success": True}))
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], f"{BASE_URL}/api/token/request")
        self.assertEqual(kwargs["json"], {"clientId": "A"})

    @patch("vas_cli.core.api.requests.get")
    def test_validate_token_header(self, mock_get):
        mock_get.return_value = MagicMock(status_code=401, json=MagicMock(return_value={"code": "TOKEN_INVALID"}))

        result = api_validate_token("a.b.c")
        self.assertEqual(result, (401, {"code": "TOKEN_INVALID"}))
        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["headers"], {"Authorization": "Bearer a.b.c"})
        self.assertEqual(kwargs["params"], {})

    @patch("vas_cli.core.api.requests.get")
    def test_validate_token_query(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200, json=MagicMock(return_value={"valid": True}))

        api_validate_token("a.b.c", use_query=True)
        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["params"], {"token": "a.b.c"})
        self.assertEqual(kwargs["headers"], {})

    @patch("vas_cli.core.api.requests.post")
    def test_unreachable(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")
        self.assertIsNone(api_request_token({}))

    @patch("vas_cli.core.api.requests.get")
    def test_non_json_response(self, mock_get):
        mock_get.return_value = MagicMock(status_code=502, text="Bad Gateway", json=MagicMock(side_effect=ValueError))
        self.assertEqual(api_validate_token("a.b.c"), (502, {"error": "Bad Gateway"}))


if __name__ == "__main__":
    unittest.main()
