import importlib


def test_all_names_resolve_at_package_root():
    import punchcard

    for name in punchcard.__all__:
        assert hasattr(punchcard, name), name


def test_core_operations_exported():
    import punchcard

    for name in [
        "PunchCard",
        "encode_text",
        "decode_text",
        "to_bytes",
        "from_bytes",
        "pack_4_3",
        "unpack_4_3",
        "example_source_card",
        "example_object_deck_card",
    ]:
        assert name in punchcard.__all__


def test_submodules_importable():
    for module in [
        "punchcard.card",
        "punchcard.text",
        "punchcard.persistence",
        "punchcard.ibm1130",
        "punchcard.encoding.hollerith",
        "punchcard.encoding.ebcdic",
        "punchcard.utils.logging_utils",
    ]:
        assert importlib.import_module(module) is not None
