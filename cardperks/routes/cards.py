"""Masked card identification and benefit catalog routes."""

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import BadRequest, NotFound

from cardperks.routes.helpers import get_json_object
from cardperks.services.cards import (
    CardInputError,
    extract_bin,
    format_card_input,
    sanitize_card_display,
    validate_masked_card,
)
from cardperks.services.catalog import Catalog

DEFAULT_COMPARE_TIERS = ("platinum", "signature")
MAX_CARD_INPUT = 32


def register_card_routes(bp: Blueprint, catalog: Catalog) -> None:
    @bp.post("/cards/identify")
    def identify_card():
        payload = get_json_object()
        masked_card = payload.get("maskedCard")
        if not isinstance(masked_card, str):
            raise BadRequest("maskedCard is required")
        try:
            validate_masked_card(masked_card)
        except CardInputError as exc:
            response = jsonify({"error": str(exc), "code": exc.code})
            response.status_code = 400
            return response
        if len(masked_card) > MAX_CARD_INPUT:
            raise BadRequest(f"maskedCard must be at most {MAX_CARD_INPUT} characters")

        bin_prefix = extract_bin(masked_card)
        card = catalog.lookup_bin(bin_prefix)
        if card is None:
            examples = catalog.example_bins()
            response = jsonify(
                {
                    "error": (
                        "Card not found in our database. Try "
                        + ", ".join(f"{b}-****-****-1234" for b in examples)
                    ),
                    "code": "card_not_found",
                    "examples": examples,
                }
            )
            response.status_code = 404
            return response

        return jsonify(
            {
                "bin": card.bin,
                "tier": card.tier,
                "tierName": catalog.tier_name(card.tier),
                "issuer": card.issuer,
                "displayNumber": sanitize_card_display(masked_card),
                "formatted": format_card_input(masked_card),
                "benefits": [b.to_dict() for b in catalog.benefits_for_tier(card.tier)],
            }
        )

    @bp.get("/tiers")
    def list_tiers():
        return jsonify(
            {
                "tiers": [
                    {
                        "tier": tier,
                        "name": catalog.tier_name(tier),
                        "benefitCount": len(catalog.benefits_for_tier(tier)),
                    }
                    for tier in catalog.tiers
                ]
            }
        )

    @bp.get("/tiers/<tier>/benefits")
    def tier_benefits(tier: str):
        if not catalog.has_tier(tier):
            raise NotFound(f"Unknown tier: {tier}")
        return jsonify(
            {
                "tier": tier,
                "name": catalog.tier_name(tier),
                "benefits": [b.to_dict() for b in catalog.benefits_for_tier(tier)],
            }
        )

    @bp.get("/compare")
    def compare_tiers():
        tiers = request.args.getlist("tiers") or list(DEFAULT_COMPARE_TIERS)
        unknown = [tier for tier in tiers if not catalog.has_tier(tier)]
        if unknown:
            raise BadRequest(f"Unknown tiers: {', '.join(unknown)}")
        return jsonify(catalog.compare(tiers))
