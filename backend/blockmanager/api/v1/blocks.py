# blockmanager/api/v1/blocks.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from blockmanager.utils.decorators import roles_required
from blockmanager.utils.optimistic_lock import enforce_optimistic_lock
from blockmanager.utils.themes import languages_list, theme_regions
from blockmanager.models.block import Block
from blockmanager.models.role import Role
from blockmanager.normalizers.block import normalize_block, normalize_block_form
from blockmanager.normalizers.role import normalize_role
from blockmanager.application.blocks.list_blocks import list_blocks
from blockmanager.application.blocks.create_block import create_block
from blockmanager.application.blocks.update_block import update_block
from blockmanager.application.blocks.delete_block import delete_block
from blockmanager.application.blocks.duplicate_block import duplicate_block
from blockmanager.application.blocks.reorder_blocks import reorder_blocks
from . import v1_bp


def _submitted_form():
    """
    Decoded block form, or None when the body cannot be a block form.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    if "region" in data and data["region"] is not None and not isinstance(data["region"], dict):
        return None
    return data


def _valid_reorder_payload(regions):
    """
    theme -> region -> list of block ids, nothing else.
    """
    if not isinstance(regions, dict):
        return False
    for placements in regions.values():
        if not isinstance(placements, dict):
            return False
        for block_ids in placements.values():
            if not isinstance(block_ids, list) or not all(isinstance(i, str) for i in block_ids):
                return False
    return True


def _form_options(block=None):
    return {
        "languages": languages_list(),
        "roles": [normalize_role(r) for r in Role.query.order_by(Role.name.asc()).all()],
        "regions": theme_regions(block),
    }


# ------------------------
# Listing & ordering
# ------------------------

@v1_bp.route("/admin/blocks", methods=["GET"])
@jwt_required()
@roles_required("admin")
def index_blocks():
    return jsonify(list_blocks())


@v1_bp.route("/admin/blocks/reorder", methods=["POST"])
@jwt_required()
@roles_required("admin")
def reorder():
    data = request.get_json(silent=True) or {}

    regions = data.get("regions") if isinstance(data, dict) else None
    if regions is not None and not _valid_reorder_payload(regions):
        return jsonify({"error": "Invalid payload"}), 400

    count = reorder_blocks(actor_id=get_jwt_identity(), regions=regions)
    if not count:
        return jsonify({"error": "Nothing to reorder"}), 400

    return jsonify({"message": "Blocks ordering updated!", "count": count}), 200


# ------------------------
# Blocks
# ------------------------

@v1_bp.route("/admin/blocks/options", methods=["GET"])
@jwt_required()
@roles_required("admin")
def block_options():
    return jsonify(_form_options())


@v1_bp.route("/admin/blocks", methods=["POST"])
@jwt_required()
@roles_required("admin")
def add_block():
    data = _submitted_form()
    if data is None:
        return jsonify({"error": "Invalid request body"}), 400

    block = create_block(actor_id=get_jwt_identity(), data=data)

    return jsonify({
        "id": block.id,
        "delta": block.delta,
        "message": "Block created."
    }), 201


@v1_bp.route("/admin/blocks/<block_id>", methods=["GET"])
@jwt_required()
@roles_required("admin")
def get_block(block_id):
    block = Block.query.filter_by(id=block_id).first_or_404()

    return jsonify({
        "block": normalize_block_form(block),
        **_form_options(block),
    })


@v1_bp.route("/admin/blocks/<block_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin")
def edit_block(block_id):
    block = Block.query.filter_by(id=block_id).first_or_404()

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(block)

    data = _submitted_form()
    if data is None:
        return jsonify({"error": "Invalid request body"}), 400

    block = update_block(block=block, actor_id=get_jwt_identity(), data=data)

    return jsonify({
        "message": "Block updated!",
        "block": normalize_block(block, admin=True)
    }), 200


@v1_bp.route("/admin/blocks/<block_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def remove_block(block_id):
    block = Block.query.filter_by(id=block_id).first_or_404()

    delete_block(block=block, actor_id=get_jwt_identity())

    return jsonify({"message": "Block was successfully removed!"}), 200


@v1_bp.route("/admin/blocks/<block_id>/duplicate", methods=["POST"])
@jwt_required()
@roles_required("admin")
def duplicate(block_id):
    original = Block.query.filter_by(id=block_id).first_or_404()

    copy = duplicate_block(original=original, actor_id=get_jwt_identity())

    return jsonify({
        "id": copy.id,
        "copy_id": copy.copy_id,
        "delta": copy.delta,
        "message": 'Block has been duplicated, it can be found under the "Unused or Unassigned" section.'
    }), 201
