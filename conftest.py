pytest_plugins = ["mockseam.pytest_plugin", "pytester"]
