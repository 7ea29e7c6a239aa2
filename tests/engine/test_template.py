"""
Tests for test templates.
"""

import pytest

import falkor
from falkor.core.config import FalkorConfig
from falkor.engine import TestCase, TestFunction, TestTemplate


def make_template():
    return (
        TestTemplate()
        .with_method("PUT")
        .with_header("TestHeader", "1234")
        .with_payload("data")
        .expect_status_code(200)
        .expect_body_matches(r"ok")
    )


class TestTemplateCases:
    """Tests for stamping test cases out of a template."""

    def test_new_test_case_copies_options(self):
        template = make_template()

        case = template.new_test_case("http://falkor.test/")

        assert isinstance(case, TestCase)
        assert case.options is not template.options
        assert case.options.method == "PUT"
        assert case.get_headers()["TestHeader"] == "1234"
        assert case.options.payload == b"data"
        assert len(case.options.evaluators) == 2

    def test_fetch_returns_test_function(self):
        fn = make_template().fetch("http://falkor.test/")

        assert isinstance(fn, TestFunction)
        assert fn.test_case.options.method == "PUT"

    def test_later_template_changes_do_not_leak(self):
        template = make_template()
        case = template.new_test_case("http://falkor.test/")

        template.with_header("TestHeader", "changed").expect_status_code(201)

        assert case.get_headers()["TestHeader"] == "1234"
        assert len(case.options.evaluators) == 2

    def test_case_changes_do_not_leak(self):
        template = make_template()
        case = template.new_test_case("http://falkor.test/")

        case.with_header("X-Case", "1").expect_json()

        assert "X-Case" not in template.get_headers()
        assert len(template.options.evaluators) == 2

    def test_clone_is_independent(self):
        template = make_template()
        clone = template.clone()

        clone.with_method("POST").with_header("TestHeader", "clone")

        assert isinstance(clone, TestTemplate)
        assert template.options.method == "PUT"
        assert template.get_headers()["TestHeader"] == "1234"
        assert clone.get_headers()["TestHeader"] == "clone"

    def test_config_passed_to_cases(self):
        config = FalkorConfig(base_url="http://configured.test/")

        case = TestTemplate(config=config).new_test_case("path")

        assert case.config is config
        assert case.resolve_url() == "http://configured.test/path"

    def test_module_level_template(self):
        assert isinstance(falkor.new_test_template(), TestTemplate)


class TestTemplateRuns:
    """Tests for running test cases made from a template."""

    @pytest.mark.asyncio
    async def test_identical_configuration(self, fake_server, make_asserter):
        fake_server.reply("PUT", "/one", body="ok").reply("PUT", "/two", body="ok")
        template = make_template()

        for path in ("/one", "/two"):
            asserter = make_asserter()
            await template.fetch(fake_server.url(path))(asserter)
            assert [a["value"] for a in asserter.assertions] == ["200=200", "True"]

        for path in ("/one", "/two"):
            request = fake_server.requests_to(path)[0]
            assert request.method == "PUT"
            assert request.headers["TestHeader"] == "1234"
            assert request.body == b"data"

    @pytest.mark.asyncio
    async def test_per_case_override(self, fake_server, make_asserter):
        fake_server.reply("PUT", "/one", body="ok").reply("PUT", "/two", body="ok")
        template = make_template()

        await template.fetch(fake_server.url("/one"))(make_asserter())
        await (
            template.fetch(fake_server.url("/two"))
            .with_header("TestHeader", 9876)
            .with_payload("data override")(make_asserter())
        )

        first = fake_server.requests_to("/one")[0]
        assert first.headers["TestHeader"] == "1234"
        assert first.body == b"data"

        second = fake_server.requests_to("/two")[0]
        assert second.headers.getall("TestHeader") == ["9876"]
        assert second.headers["Content-Length"] == "13"
        assert second.body == b"data override"
