# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import pytest


def test_public_api_imports() -> None:
    """
    Verify that the main components are exposed at the top level package.
    """
    try:
        from coreason_flowtree import EditorSession, HistoryState, TopologyEngine, Workflow
    except ImportError as e:
        pytest.fail(f"Failed to import public API: {e}")

    assert EditorSession is not None
    assert HistoryState is not None
    assert TopologyEngine is not None
    assert Workflow is not None


def test_all_names_resolve() -> None:
    import coreason_flowtree

    for name in coreason_flowtree.__all__:
        assert hasattr(coreason_flowtree, name), name
