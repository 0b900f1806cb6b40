pytest_plugins = ["tests.fixtures.client"]
