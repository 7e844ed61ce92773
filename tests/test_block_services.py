"""Tests for application/blocks - the block use cases against a real session.

Tests:
- Create / update with settings folding and region reconciliation
- Delete guard for plugin blocks
- Duplicate into the unused section
- Reorder batches and region compaction
- Audit trail and delta allocation
"""

from __future__ import annotations

import pytest

from blockmanager.application.blocks.create_block import create_block
from blockmanager.application.blocks.delete_block import delete_block
from blockmanager.application.blocks.duplicate_block import duplicate_block
from blockmanager.application.blocks.exceptions import BlockValidationError
from blockmanager.application.blocks.list_blocks import list_blocks
from blockmanager.application.blocks.reorder_blocks import reorder_blocks
from blockmanager.application.blocks.update_block import update_block
from blockmanager.domain.invariants.exceptions import InvariantViolation
from blockmanager.extensions import db
from blockmanager.models.audit_log import AuditLog
from blockmanager.models.block import Block
from blockmanager.utils.delta import next_delta
from blockmanager.validators.block import handler_validator

FRONT = "FrontendTheme"
BACK = "BackendTheme"


def fresh(block_id: str) -> Block | None:
    db.session.expire_all()
    return db.session.get(Block, block_id)


# =============================================================================
# Create
# =============================================================================


def test_create_folds_unknown_fields_into_settings(app) -> None:
    block = create_block(
        actor_id="admin-1",
        data={
            "title": "Promo",
            "body": "<p>Sale</p>",
            "cta_label": "Buy now",
            "region": {FRONT: "sidebar"},
        },
    )

    block = fresh(block.id)
    assert block.handler == "Block"
    assert block.settings == {"cta_label": "Buy now"}
    assert block.delta == "1"
    assert [(r.theme, r.region, r.ordering) for r in block.regions] == [(FRONT, "sidebar", 0)]


def test_create_forces_custom_handler_and_appends_to_region(app, make_block) -> None:
    make_block("Existing", regions=((FRONT, "sidebar", 0),), delta="1")

    block = create_block(
        actor_id="admin-1",
        data={"title": "New", "body": "x", "handler": "Menu", "region": {FRONT: "sidebar"}},
    )

    block = fresh(block.id)
    assert block.handler == "Block"
    assert block.delta == "2"
    assert block.regions[0].ordering == 1


def test_create_skips_blank_regions_and_assigns_roles(app, make_role) -> None:
    editor = make_role("Editor")

    block = create_block(
        actor_id="admin-1",
        data={"title": "T", "body": "B", "roles": [editor.id], "region": {FRONT: "", BACK: "main-menu"}},
    )

    block = fresh(block.id)
    assert [(r.theme, r.region) for r in block.regions] == [(BACK, "main-menu")]
    assert [r.id for r in block.roles] == [editor.id]


def test_create_reports_validation_errors_without_writing(app) -> None:
    with pytest.raises(BlockValidationError) as excinfo:
        create_block(actor_id="admin-1", data={"title": "", "region": {FRONT: "nowhere"}})

    assert set(excinfo.value.errors) == {"title", "body", "region"}
    assert Block.query.count() == 0


def test_create_rejects_settings_shadowing_a_column(app) -> None:
    with pytest.raises(InvariantViolation):
        create_block(
            actor_id="admin-1",
            data={"title": "T", "body": "B", "settings": {"title": "other"}},
        )


def test_create_writes_audit_log(app) -> None:
    block = create_block(actor_id="admin-1", data={"title": "T", "body": "B"})

    log = AuditLog.query.filter_by(action="block.create").one()
    assert log.entity_id == block.id
    assert log.actor_id == "admin-1"


# =============================================================================
# Update
# =============================================================================


def test_update_keeps_identity_for_same_theme(app, make_block, orderings) -> None:
    block = make_block("Mover", regions=((FRONT, "sidebar", 0),))
    other = make_block("Stays", regions=((FRONT, "sidebar", 1),))
    make_block("Footer", regions=((FRONT, "footer", 0),))
    original_region_id = block.regions[0].id

    update_block(
        block=block,
        actor_id="admin-1",
        data={"title": "Mover", "body": "B", "region": {FRONT: "footer", BACK: "main-menu"}},
    )

    block = fresh(block.id)
    by_theme = {r.theme: r for r in block.regions}
    assert by_theme[FRONT].id == original_region_id
    assert by_theme[FRONT].region == "footer"
    assert by_theme[FRONT].ordering == 1
    assert by_theme[BACK].id != original_region_id

    # the vacated sidebar is compacted
    assert orderings(FRONT, "sidebar") == {other.id: 0}


def test_update_blank_region_unassigns_theme(app, make_block) -> None:
    block = make_block("B", regions=((FRONT, "sidebar", 0), (BACK, "main-menu", 0)))

    update_block(block=block, actor_id="admin-1", data={"title": "B", "body": "x", "region": {FRONT: ""}})

    block = fresh(block.id)
    assert [(r.theme, r.region) for r in block.regions] == [(BACK, "main-menu")]


def test_update_ignores_handler_and_id(app, make_block) -> None:
    block = make_block("B", handler="Menu", delta="main-menu", body=None)
    block_id = block.id

    update_block(
        block=block,
        actor_id="admin-1",
        data={"id": "hijack", "handler": "Block", "title": "Renamed", "menu_id": 4},
    )

    block = fresh(block_id)
    assert block.handler == "Menu"
    assert block.title == "Renamed"
    assert block.settings == {"menu_id": 4}


def test_update_runs_handler_validators(app, make_block) -> None:
    @handler_validator("Menu")
    def menu_needs_menu_id(data):
        return {} if data["settings"].get("menu_id") else {"menu_id": "Pick a menu"}

    block = make_block("Menu", handler="Menu", delta="main-menu", body=None)

    with pytest.raises(BlockValidationError) as excinfo:
        update_block(block=block, actor_id="admin-1", data={"title": "Menu"})

    assert excinfo.value.errors == {"menu_id": "Pick a menu"}


def test_update_without_unknown_fields_keeps_settings(app, make_block) -> None:
    block = make_block("B", settings={"colour": "red"})

    update_block(block=block, actor_id="admin-1", data={"title": "C", "body": "x"})

    block = fresh(block.id)
    assert block.title == "C"
    assert block.settings == {"colour": "red"}
    assert AuditLog.query.filter_by(action="block.update").one().payload == {"fields": ["title", "body"]}


def test_update_with_empty_settings_clears_them(app, make_block) -> None:
    block = make_block("B", settings={"foo": 1})

    update_block(block=block, actor_id="admin-1", data={"title": "B", "body": "x", "settings": {}})

    assert fresh(block.id).settings == {}


def test_update_accepts_partial_form(app, make_block) -> None:
    block = make_block("Keep", regions=((FRONT, "sidebar", 0),))

    update_block(block=block, actor_id="admin-1", data={"region": {FRONT: "footer"}})

    block = fresh(block.id)
    assert block.title == "Keep"
    assert block.body == "<p>Body</p>"
    assert [(r.theme, r.region) for r in block.regions] == [(FRONT, "footer")]


# =============================================================================
# Delete & duplicate
# =============================================================================


def test_delete_refuses_plugin_blocks(app, make_block) -> None:
    block = make_block("Menu", handler="Menu", delta="main-menu")

    with pytest.raises(InvariantViolation):
        delete_block(block=block, actor_id="admin-1")

    assert fresh(block.id) is not None


def test_delete_compacts_vacated_region(app, make_block, orderings) -> None:
    first = make_block("First", regions=((FRONT, "sidebar", 0),))
    second = make_block("Second", regions=((FRONT, "sidebar", 1),))
    first_id = first.id

    delete_block(block=first, actor_id="admin-1")

    assert fresh(first_id) is None
    assert orderings(FRONT, "sidebar") == {second.id: 0}


def test_duplicate_starts_unused(app, make_block, make_role) -> None:
    original = make_block("Promo", delta="1", settings={"foo": 1}, regions=((FRONT, "sidebar", 0),))
    original.roles = [make_role("Editor")]
    db.session.commit()

    copy = duplicate_block(original=original, actor_id="admin-1")

    copy = fresh(copy.id)
    assert copy.id != original.id
    assert copy.copy_id == original.id
    assert copy.delta == "2"
    assert copy.settings == {"foo": 1}
    assert copy.regions == []
    assert copy.roles == []
    assert [b["id"] for b in list_blocks()["unused"]] == [copy.id]


def test_next_delta_ignores_named_deltas(app, make_block) -> None:
    make_block("Menu", handler="Menu", delta="main-menu")
    make_block("Menu 2", handler="Menu", delta="7")

    assert next_delta("Menu") == "8"
    assert next_delta("Search") == "1"


# =============================================================================
# Reorder
# =============================================================================


def test_reorder_assigns_submission_order(app, make_block, orderings) -> None:
    b1 = make_block("b1", regions=((FRONT, "sidebar", 0),))
    b2 = make_block("b2", regions=((FRONT, "sidebar", 1),))
    b3 = make_block("b3", regions=((FRONT, "sidebar", 2),))

    written = reorder_blocks(actor_id="admin-1", regions={FRONT: {"sidebar": [b3.id, b1.id, b2.id]}})

    assert written == 3
    assert orderings(FRONT, "sidebar") == {b3.id: 0, b1.id: 1, b2.id: 2}
    assert AuditLog.query.filter_by(action="block.reorder").count() == 1


def test_reorder_moves_and_places_blocks(app, make_block, orderings) -> None:
    moved = make_block("moved", regions=((FRONT, "sidebar", 0),))
    stays = make_block("stays", regions=((FRONT, "sidebar", 1),))
    unused = make_block("unused")

    written = reorder_blocks(
        actor_id="admin-1",
        regions={FRONT: {"footer": [unused.id, moved.id]}},
    )

    assert written == 2
    assert orderings(FRONT, "footer") == {unused.id: 0, moved.id: 1}
    assert orderings(FRONT, "sidebar") == {stays.id: 0}


def test_reorder_skips_unknown_blocks(app, make_block, orderings) -> None:
    block = make_block("b", regions=((FRONT, "sidebar", 0),))

    written = reorder_blocks(actor_id="admin-1", regions={FRONT: {"sidebar": ["missing", block.id]}})

    assert written == 1
    assert orderings(FRONT, "sidebar") == {block.id: 0}


def test_reorder_empty_payload_is_noop(app) -> None:
    assert reorder_blocks(actor_id="admin-1", regions={}) == 0
    assert reorder_blocks(actor_id="admin-1", regions=None) == 0
    assert AuditLog.query.count() == 0


# =============================================================================
# Listing
# =============================================================================


def test_list_groups_front_back_and_unused(app, make_block) -> None:
    second = make_block("second", regions=((FRONT, "sidebar", 1),))
    first = make_block("first", regions=((FRONT, "sidebar", 0), (BACK, "main-menu", 0)))
    lonely = make_block("lonely")
    elsewhere = make_block("elsewhere", regions=(("OtherTheme", "top", 0),))

    listing = list_blocks()

    assert listing["front"]["theme"] == FRONT
    assert [b["id"] for b in listing["front"]["regions"]["sidebar"]] == [first.id, second.id]
    assert [b["id"] for b in listing["back"]["regions"]["main-menu"]] == [first.id]
    assert {b["id"] for b in listing["unused"]} == {lonely.id, elsewhere.id}

