from pathlib import Path

import pytest

from route_scaffold.errors import InvalidSpecification, SpecificationUnavailable
from route_scaffold.parser.swagger import load_apidoc, parse_apidoc

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadApidoc:
    def test_parse_petstore_endpoints_count(self):
        doc = load_apidoc(FIXTURES / "petstore.yaml")
        assert len(doc.endpoints()) == 3

    def test_parse_get_pets(self):
        doc = load_apidoc(FIXTURES / "petstore.yaml")
        pets = [e for e in doc.endpoints() if e.path == "/pets"][0]
        assert pets.verbs == ["GET", "POST"]
        assert pets.parameters is None
        get = pets.operations["GET"]
        assert get.summary == "List all pets"
        assert get.parameters[0].name == "limit"
        assert get.parameters[0].location == "query"

    def test_endpoint_parameters(self):
        doc = load_apidoc(FIXTURES / "petstore.yaml")
        pet = [e for e in doc.endpoints() if e.path == "/pets/{petId}"][0]
        assert [p.name for p in pet.parameters] == ["petId"]
        assert pet.verbs == ["GET"]

    def test_accepts_json(self, tmp_path):
        f = tmp_path / "api.json"
        f.write_text('{"info": {"version": "1.0.0"}, "paths": {"/a": {"get": {}}}}')
        doc = load_apidoc(str(f))
        assert doc.endpoints()[0].verbs == ["GET"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecificationUnavailable):
            load_apidoc(tmp_path / "nope.yaml")

    def test_url_is_not_supported(self):
        with pytest.raises(SpecificationUnavailable, match="URL"):
            load_apidoc("https://example.com/api.yaml")

    def test_bad_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("paths: [unclosed\n")
        with pytest.raises(SpecificationUnavailable):
            load_apidoc(f)


class TestParseApidoc:
    def test_top_level_must_be_mapping(self):
        with pytest.raises(InvalidSpecification):
            parse_apidoc(["not", "a", "mapping"])

    def test_parameter_without_name(self):
        data = {"paths": {"/a": {"get": {"parameters": [{"in": "query"}]}}}}
        with pytest.raises(InvalidSpecification):
            parse_apidoc(data)

    def test_verbs_are_upper_cased_and_other_keys_ignored(self):
        data = {"paths": {"/a": {"Get": {}, "x-internal": True, "delete": {}, "GET": {"summary": "dup"}}}}
        endpoint = parse_apidoc(data).endpoints()[0]
        assert endpoint.verbs == ["GET", "DELETE"]
        assert endpoint.operations["GET"].summary == ""

    def test_empty_path_item(self):
        endpoint = parse_apidoc({"paths": {"/a": None}}).endpoints()[0]
        assert endpoint.operations == {}
        assert endpoint.parameters is None
