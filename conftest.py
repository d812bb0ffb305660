"""Pytest configuration shared by the whole test suite."""


def pytest_configure(config):
    """Register the custom markers used by the tests."""
    config.addinivalue_line("markers", "smoke: fast checks of core behaviour")
    config.addinivalue_line("markers", "integration: end-to-end tests through PyMuPDF")
    config.addinivalue_line("markers", "requires_pdf: tests that write and read PDF files")
