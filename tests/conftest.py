from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from flask import Flask
from flask_jwt_extended import create_access_token

from blockmanager import create_app
from blockmanager.extensions import db
from blockmanager.models.block import Block
from blockmanager.models.block_region import BlockRegion
from blockmanager.models.role import Role
from blockmanager.validators.block import clear_handler_validators


@pytest.fixture
def app() -> Iterator[Flask]:
    """Application bound to a fresh in-memory database."""

    app = create_app("testing")
    with app.app_context():
        db.create_all()
        try:
            yield app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture
def client(app: Flask):
    return app.test_client()


@pytest.fixture
def admin_headers(app: Flask) -> dict[str, str]:
    token = create_access_token(identity="admin-1", additional_claims={"role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers(app: Flask) -> dict[str, str]:
    token = create_access_token(identity="editor-1", additional_claims={"role": "editor"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_handler_validators() -> Iterator[None]:
    yield
    clear_handler_validators()


@pytest.fixture
def make_block(app: Flask) -> Callable[..., Block]:
    """Persist a block; regions are (theme, region, ordering) tuples."""

    def _make(
        title: str = "Block",
        *,
        handler: str = "Block",
        delta: str | None = None,
        body: str | None = "<p>Body</p>",
        settings: dict | None = None,
        regions: tuple = (),
    ) -> Block:
        block = Block()
        block.title = title
        block.handler = handler
        block.delta = delta
        block.body = body
        block.settings = settings or {}
        block.locale = []

        for theme, region, ordering in regions:
            assignment = BlockRegion()
            assignment.theme = theme
            assignment.region = region
            assignment.ordering = ordering
            block.regions.append(assignment)

        db.session.add(block)
        db.session.commit()
        return block

    return _make


@pytest.fixture
def make_role(app: Flask) -> Callable[..., Role]:
    def _make(name: str) -> Role:
        role = Role()
        role.name = name
        role.slug = name.lower().replace(" ", "-")
        db.session.add(role)
        db.session.commit()
        return role

    return _make


@pytest.fixture
def orderings(app: Flask) -> Callable[[str, str], dict[str, int]]:
    """block id -> ordering for one (theme, region), read fresh from the db."""

    def _read(theme: str, region: str) -> dict[str, int]:
        db.session.expire_all()
        return {
            r.block_id: r.ordering
            for r in BlockRegion.query.filter_by(theme=theme, region=region).all()
        }

    return _read
