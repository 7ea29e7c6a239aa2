"""
Demo script showing templates and chained test cases.

Spawns two test cases from one template, follows a login with a second
request and prints what the asserter collected.
"""

import asyncio

import falkor


def build_api_template() -> falkor.TestTemplate:
    """Common options for every JSON API call."""
    return (
        falkor.new_test_template()
        .with_header("Accept", "application/json")
        .with_cookie("session", "demo")
        .expect_json_with_charset()
    )


def print_result(name: str, asserter: falkor.Asserter) -> None:
    status = "SUCCESS" if asserter.passed else "FAILURE"
    print(f"{status} {name}")
    for error in asserter.errors:
        print(f"  {error}")


async def demo_template():
    print("=" * 60)
    print("Demo 1: Test cases from a template")
    print("=" * 60)

    api = build_api_template()
    tests = {
        "status": api.fetch("/status").expect_status_code(200),
        "missing": api.fetch("/missing").expect_status_code(404),
    }

    for name, test in tests.items():
        asserter = falkor.Asserter()
        await test(asserter)
        print_result(name, asserter)


async def demo_chain():
    print("=" * 60)
    print("Demo 2: Chaining a second request")
    print("=" * 60)

    api = build_api_template()
    test_login = (
        api.fetch("/login")
        .with_method("POST")
        .with_form_encoded_payload({"user": "demo", "password": "demo"})
        .expect_status_code(200)
        .then(lambda res: api.fetch("/profile").expect_status_code(200))
    )

    asserter = falkor.Asserter()
    await test_login(asserter)
    print_result("login", asserter)


async def main():
    falkor.set_base_url("http://localhost:8080/")
    await demo_template()
    await demo_chain()


if __name__ == "__main__":
    asyncio.run(main())
