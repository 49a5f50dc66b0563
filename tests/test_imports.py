def test_imports():
    """
    @brief
    Verifies that all core entityguard modules are importable.

    @details
    Ensures package structure integrity and confirms that
    entityguard, its subpackages and the CLI module are accessible
    without import errors.
    """
    import entityguard
    import entityguard.dataloader
    import entityguard.introspection
    import entityguard.report
    import entityguard.validator
    import scripts.run

    # --- Assert ---
    # Confirm that modules were successfully imported and resolved
    assert all([entityguard, entityguard.dataloader, entityguard.validator, scripts.run])
    assert entityguard.__version__ == "0.1.0"
