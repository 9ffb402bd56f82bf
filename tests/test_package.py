"""Basic tests for the binary_store package."""


def test_import_binary_store():
    """Test that binary_store can be imported."""
    import binary_store

    assert hasattr(binary_store, "__version__")
    assert binary_store.__version__ == "1.0.0"


def test_version_format():
    """Test that version follows semver format."""
    import binary_store

    parts = binary_store.__version__.split(".")
    assert len(parts) == 3
    assert all(p.isdigit() for p in parts)


def test_public_names_exported():
    import binary_store

    for name in binary_store.__all__:
        assert hasattr(binary_store, name), name
