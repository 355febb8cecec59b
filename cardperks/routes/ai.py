"""AI-backed summary, recommendation and translation routes."""

from typing import Any, List

from flask import Blueprint, current_app, g, jsonify
from werkzeug.exceptions import BadRequest, TooManyRequests

from cardperks.llm.gateway import CreditsExhaustedError, RateLimitedError
from cardperks.routes.helpers import (
    PaymentRequired,
    get_json_object,
    optional_string,
    parse_language,
    require_choice,
    require_string,
)
from cardperks.services.recommendations import LIFESTYLE_CONTEXT, BenefitSummary, recommend_benefits
from cardperks.services.sanitize import sanitize_text
from cardperks.services.summaries import summarize_benefit
from cardperks.services.translation import translate_text

MAX_BENEFITS = 50


def parse_benefits(raw: Any) -> List[BenefitSummary]:
    if not isinstance(raw, list) or not raw:
        raise BadRequest("benefits must be a non-empty array")
    if len(raw) > MAX_BENEFITS:
        raise BadRequest(f"benefits must contain at most {MAX_BENEFITS} items")

    benefits: List[BenefitSummary] = []
    seen = set()
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise BadRequest(f"benefits[{index}] must be an object")
        benefit = BenefitSummary(
            id=require_string(item, "id", 100),
            name=require_string(item, "name", 200, min_length=0),
            category=require_string(item, "category", 100, min_length=0),
            tnc=require_string(item, "tnc", 5000, min_length=0),
        )
        if benefit.id in seen:
            raise BadRequest(f"duplicate benefit id: {benefit.id}")
        seen.add(benefit.id)
        benefits.append(benefit)
    return benefits


def register_ai_routes(bp: Blueprint) -> None:
    @bp.post("/summarize")
    def summarize():
        payload = get_json_object()
        tnc = require_string(payload, "tnc", 10000)
        benefit_name = require_string(payload, "benefitName", 200)
        language = parse_language(payload)

        tnc = sanitize_text(tnc)
        benefit_name = sanitize_text(benefit_name)
        if not tnc or not benefit_name:
            raise BadRequest("tnc and benefitName must contain visible text")

        try:
            summary = summarize_benefit(current_app.config["LLM_CLIENT"], benefit_name, tnc, language)
        except RateLimitedError as exc:
            raise TooManyRequests(str(exc))
        except CreditsExhaustedError as exc:
            raise PaymentRequired(str(exc))

        current_app.logger.info(
            "Summarized benefit %r in %s (user: %s)", benefit_name, language, g.current_user["id"]
        )
        return jsonify({"summary": summary})

    @bp.post("/recommend")
    def recommend():
        payload = get_json_object()
        lifestyle = require_choice(payload, "lifestyle", LIFESTYLE_CONTEXT)
        location = optional_string(payload, "location", 100)
        benefits = parse_benefits(payload.get("benefits"))
        language = parse_language(payload)

        recommendations = recommend_benefits(
            current_app.config["LLM_CLIENT"],
            lifestyle,
            benefits,
            location=sanitize_text(location) if location else None,
            language=language,
        )

        current_app.logger.info(
            "Generated %d recommendations for %s lifestyle (user: %s)",
            len(recommendations),
            lifestyle,
            g.current_user["id"],
        )
        return jsonify({"recommendations": [rec.to_dict() for rec in recommendations]})

    @bp.post("/translate")
    def translate():
        payload = get_json_object()
        text = require_string(payload, "text", 5000)
        target_language = parse_language(payload, "targetLanguage", default="ta")

        text = sanitize_text(text)
        if not text:
            raise BadRequest("text must contain visible text")

        translated = translate_text(current_app.config["LLM_CLIENT"], text, target_language)
        current_app.logger.info("Translated text to %s (user: %s)", target_language, g.current_user["id"])
        return jsonify({"translatedText": translated})
