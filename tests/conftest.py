from autospecimen.pytest_plugin import mock_specimens, specimens  # noqa: F401
