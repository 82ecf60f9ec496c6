def by_integration_marker(item):
    # Unit tests first, then tests that need a running MongoDB
    return 1 if item.get_closest_marker("integration") is not None or "integration" in str(item.fspath) else 0


def pytest_addoption(parser):
    parser.addoption("--integration-last", action="store_true", default=False)


def pytest_collection_modifyitems(items, config):
    if config.getoption("--integration-last"):
        items.sort(key=by_integration_marker)
