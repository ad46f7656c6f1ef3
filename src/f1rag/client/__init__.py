"""Client applications: Flask web API, Click CLI and document loaders."""
