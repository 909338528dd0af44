"""
Tests for request configuration values, address encoding and the
method-dependent parameter encoding.
"""

import dataclasses
import json
import unittest

import requests

from media_api.errors import EncodingError, ErrorKind
from media_api.request import (
    HTTPMethod,
    ParameterEncoding,
    RequestSpec,
    build_transport_request,
    default_headers,
    encode_address,
    encode_query,
    encoding_for,
)

TARGET = "https://api.example.com/items"


class TestEncodeAddress(unittest.TestCase):
    def test_plain_url_unchanged(self):
        self.assertEqual(encode_address(TARGET), TARGET)

    def test_query_characters_kept(self):
        url = "https://api.example.com/items?page=1&sort=name"
        self.assertEqual(encode_address(url), url)

    def test_space_escaped(self):
        self.assertEqual(
            encode_address("https://api.example.com/my items"),
            "https://api.example.com/my%20items",
        )

    def test_non_ascii_escaped_as_utf8(self):
        self.assertEqual(
            encode_address("https://api.example.com/café"),
            "https://api.example.com/caf%C3%A9",
        )

    def test_percent_is_escaped_again(self):
        self.assertEqual(
            encode_address("https://api.example.com/a%20b"),
            "https://api.example.com/a%2520b",
        )

    def test_fragment_marker_escaped(self):
        self.assertEqual(encode_address("https://x.io/a#b"), "https://x.io/a%23b")

    def test_missing_address_rejected(self):
        with self.assertRaises(EncodingError) as ctx:
            encode_address(None)
        self.assertIs(ctx.exception.kind, ErrorKind.ENCODING_FAILURE)

    def test_non_string_rejected(self):
        with self.assertRaises(EncodingError):
            encode_address(42)

    def test_lone_surrogate_rejected(self):
        with self.assertRaises(EncodingError):
            encode_address("https://api.example.com/\ud800")

    def test_malformed_address_not_validated(self):
        # Structural problems surface later, from the transport
        self.assertEqual(encode_address("not a url"), "not%20a%20url")


class TestHTTPMethod(unittest.TestCase):
    def test_coerce_lowercase(self):
        self.assertIs(HTTPMethod.coerce("post"), HTTPMethod.POST)

    def test_coerce_member(self):
        self.assertIs(HTTPMethod.coerce(HTTPMethod.PUT), HTTPMethod.PUT)

    def test_coerce_unknown(self):
        with self.assertRaises(ValueError):
            HTTPMethod.coerce("FETCH")


class TestEncodingFor(unittest.TestCase):
    def test_get_and_head_use_query(self):
        self.assertIs(encoding_for(HTTPMethod.GET), ParameterEncoding.QUERY)
        self.assertIs(encoding_for("head"), ParameterEncoding.QUERY)

    def test_other_methods_use_json(self):
        for method in ("POST", "PUT", "PATCH", "DELETE", "OPTIONS"):
            with self.subTest(method=method):
                self.assertIs(encoding_for(method), ParameterEncoding.JSON)


class TestRequestSpec(unittest.TestCase):
    def test_defaults(self):
        spec = RequestSpec()
        self.assertIsNone(spec.target)
        self.assertIs(spec.method, HTTPMethod.GET)
        self.assertIsNone(spec.parameters)
        self.assertFalse(spec.show_indicator)

    def test_frozen(self):
        spec = RequestSpec(target=TARGET)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            spec.target = "https://other.example.com"

    def test_parameters_detached_from_caller(self):
        params = {"page": "1"}
        spec = RequestSpec(target=TARGET, parameters=params)
        params["page"] = "2"
        self.assertEqual(spec.parameters["page"], "1")

    def test_method_string_coerced(self):
        self.assertIs(RequestSpec(method="delete").method, HTTPMethod.DELETE)


class TestBuildTransportRequest(unittest.TestCase):
    def _prepare(self, transport_request):
        return requests.Request(**transport_request.as_requests_kwargs()).prepare()

    def test_get_parameters_go_to_query_string(self):
        spec = RequestSpec(target=TARGET, parameters={"page": "1"})
        req = build_transport_request(spec)
        self.assertIs(req.encoding, ParameterEncoding.QUERY)
        self.assertEqual(req.params, [("page", "1")])
        self.assertIsNone(req.json)

        prepared = self._prepare(req)
        self.assertEqual(prepared.url, TARGET + "?page=1")
        self.assertIsNone(prepared.body)

    def test_post_parameters_go_to_json_body(self):
        spec = RequestSpec(target=TARGET, method=HTTPMethod.POST, parameters={"name": "x"})
        req = build_transport_request(spec)
        self.assertIs(req.encoding, ParameterEncoding.JSON)
        self.assertIsNone(req.params)
        self.assertEqual(req.json, {"name": "x"})

        prepared = self._prepare(req)
        self.assertEqual(prepared.url, TARGET)
        self.assertEqual(json.loads(prepared.body), {"name": "x"})

    def test_content_type_header(self):
        req = build_transport_request(RequestSpec(target=TARGET))
        self.assertEqual(req.headers, {"Content-Type": "application/json"})
        self.assertEqual(default_headers(), {"Content-Type": "application/json"})

    def test_no_authorization_header(self):
        req = build_transport_request(RequestSpec(target=TARGET, method="POST"))
        self.assertNotIn("Authorization", req.headers)

    def test_without_parameters(self):
        req = build_transport_request(RequestSpec(target=TARGET, method="PUT"))
        kwargs = req.as_requests_kwargs()
        self.assertNotIn("json", kwargs)
        self.assertNotIn("params", kwargs)

    def test_timeout_carried(self):
        req = build_transport_request(RequestSpec(target=TARGET), timeout=3.5)
        self.assertEqual(req.timeout, 3.5)

    def test_missing_target_fails_before_io(self):
        with self.assertRaises(EncodingError):
            build_transport_request(RequestSpec())

    def test_nested_parameters_keep_values_in_query(self):
        spec = RequestSpec(
            target=TARGET,
            parameters={"filter": {"type": "video", "year": 2021}, "ids": [1, 2]},
        )
        prepared = self._prepare(build_transport_request(spec))
        query = prepared.url.split("?", 1)[1]
        self.assertEqual(
            query,
            "filter%5Btype%5D=video&filter%5Byear%5D=2021&ids%5B%5D=1&ids%5B%5D=2",
        )


class TestEncodeQuery(unittest.TestCase):
    def test_scalars_sorted_by_key(self):
        self.assertEqual(
            encode_query({"page": 2, "q": "cats"}),
            [("page", "2"), ("q", "cats")],
        )

    def test_nested_mapping_uses_brackets(self):
        self.assertEqual(
            encode_query({"filter": {"year": 2021, "type": "video"}}),
            [("filter[type]", "video"), ("filter[year]", "2021")],
        )

    def test_list_uses_empty_brackets(self):
        self.assertEqual(encode_query({"ids": [1, 2]}), [("ids[]", "1"), ("ids[]", "2")])

    def test_list_of_mappings(self):
        self.assertEqual(
            encode_query({"items": [{"id": 1}]}),
            [("items[][id]", "1")],
        )

    def test_booleans_are_numeric(self):
        self.assertEqual(encode_query({"a": True, "b": False}), [("a", "1"), ("b", "0")])

    def test_none_is_empty_value(self):
        self.assertEqual(encode_query({"a": None}), [("a", "")])

    def test_empty_mapping(self):
        self.assertEqual(encode_query({}), [])


if __name__ == "__main__":
    unittest.main()
