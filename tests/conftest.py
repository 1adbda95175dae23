pytest_plugins = ["prreviewer.testing.conftest"]
