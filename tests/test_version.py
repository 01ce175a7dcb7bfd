from route_scaffold.parser.base import ApiDoc
from route_scaffold.parser.version import major_tag, resolve_version_tag


class TestMajorTag:
    def test_semver(self):
        assert major_tag("2.3.1") == "v2"

    def test_zero_major(self):
        assert major_tag("0.9.0") == "v0"

    def test_float_version(self):
        assert major_tag(1.5) == "v1"


class TestResolveVersionTag:
    def test_from_info(self):
        assert resolve_version_tag(ApiDoc.from_document({"info": {"version": "2.3.1"}})) == "v2"

    def test_missing_version_defaults_to_v1(self):
        assert resolve_version_tag(ApiDoc.from_document({"info": {}})) == "v1"

    def test_no_document(self):
        assert resolve_version_tag(None) == "v1"
