from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from pubbot.application.ports.knowledge_base import KnowledgeBasePort

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
SECTION_SEPARATOR = "\n\n---\n\n"


class PubInfoStore(KnowledgeBasePort):
    """Static pub information loaded from JSON files and rendered as prompt sections."""

    def __init__(
        self,
        data_dir: str | Path | None = None,
        timezone: ZoneInfo | None = None,
    ) -> None:
        self._data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self._timezone = timezone or ZoneInfo("Europe/Berlin")
        self._logger = logging.getLogger(__name__)
        self._menu = self._load("menu.json")
        self._hours = self._load("hours.json")
        self._events = self._load("events.json")
        self._faq = self._load("faq.json")

    def render_context(self, now: datetime | None = None) -> str:
        sections = [
            self.format_current_context(now),
            self.format_hours(),
            self.format_menu(),
            self.format_events(),
            self.format_faq(),
        ]
        return SECTION_SEPARATOR.join(s for s in sections if s)

    def format_current_context(self, now: datetime | None = None) -> str:
        now = now or datetime.now(self._timezone)
        day_name = DAYS[now.weekday()]
        today = (self._hours.get("opening_hours") or {}).get(day_name) or {}
        if today.get("status") == "closed":
            hours = "Closed"
        elif "open" in today and "close" in today:
            hours = f"{today['open']} - {today['close']}"
        else:
            hours = "Check at venue"
        return (
            "**CURRENT CONTEXT:**\n"
            f"Day: {day_name.capitalize()}\n"
            f"Time: {now.strftime('%H:%M')} ({self._timezone.key} time)\n"
            f"Today's hours: {hours}"
        )

    def format_hours(self) -> str:
        if not self._hours:
            return ""
        lines = ["**OPENING HOURS:**", ""]
        opening = self._hours.get("opening_hours") or {}
        for day in DAYS:
            info = opening.get(day) or {}
            if info.get("status") == "closed":
                lines.append(f"{day.capitalize()}: Closed")
            elif "open" in info and "close" in info:
                lines.append(f"{day.capitalize()}: {info['open']} - {info['close']}")
        notes = self._hours.get("special_notes") or []
        if notes:
            lines += ["", "**SPECIAL NOTES:**"] + [f"• {note}" for note in notes]
        return "\n".join(lines)

    def format_menu(self) -> str:
        if not self._menu:
            return ""
        concept = self._menu.get("concept") or {}
        food = self._menu.get("food") or {}
        taps = (self._menu.get("beer") or {}).get("taps") or {}
        location = self._menu.get("location") or {}
        return "\n".join(
            [
                "**MENU INFORMATION:**",
                "",
                "**CONCEPT:**",
                f"• Type: {concept.get('type', '')}",
                f"• Specialties: {', '.join(concept.get('specialties', []))}",
                f"• Service Style: {concept.get('service_style', '')}",
                "",
                "**FOOD:**",
                f"• Specialty: {food.get('specialty', '')}",
                f"• Style: {food.get('style', '')}",
                f"• {food.get('note', '')}",
                "",
                "**BEER:**",
                f"• Number of Taps: {taps.get('count', '')}",
                f"• Beer Styles: {', '.join(taps.get('styles', []))}",
                f"• {taps.get('note', '')}",
                "",
                "**LOCATION:**",
                f"• Address: {location.get('address', '')}",
                f"• Area: {location.get('area', '')}",
                f"• Features: {', '.join(location.get('features', []))}",
            ]
        )

    def format_events(self) -> str:
        if not self._events:
            return ""
        lines = ["**VENUE FEATURES & INFORMATION:**", "", "**REGULAR FEATURES:**"]
        for feature in (self._events.get("regular_features") or {}).values():
            lines += _feature_lines(feature, ("availability", "seating", "note"))
        lines.append("**SPECIAL FEATURES:**")
        for feature in (self._events.get("special_features") or {}).values():
            lines += _feature_lines(feature, ("rotation", "info", "style"))
        venue = self._events.get("venue_info") or {}
        if venue:
            lines += [
                "**VENUE INFORMATION:**",
                f"• Atmosphere: {venue.get('atmosphere', '')}",
                f"• Location: {venue.get('location', '')}",
                f"• Specialties: {', '.join(venue.get('specialties', []))}",
            ]
        return "\n".join(lines)

    def format_faq(self) -> str:
        if not self._faq:
            return ""
        rules = self._faq.get("house_rules") or {}
        facilities = self._faq.get("facilities") or {}
        payment = self._faq.get("payment") or {}
        reservations = self._faq.get("reservations") or {}
        location = self._faq.get("location_info") or {}

        pets = rules.get("pets") or {}
        wifi = facilities.get("wifi") or {}
        garden = facilities.get("beer_garden") or {}
        access = facilities.get("accessibility") or {}

        lines = [
            "**POLICIES & INFORMATION:**",
            "",
            "**HOUSE RULES:**",
            f"• Pets: {'Welcome!' if pets.get('allowed') else 'Not allowed'} {pets.get('policy', '')}".rstrip(),
        ]
        if pets.get("restrictions"):
            lines.append(f"  Restriction: {pets['restrictions']}")
        for label, key in (("Smoking", "smoking"), ("Age", "age_restrictions"), ("Dress Code", "dress_code")):
            lines.append(f"• {label}: {(rules.get(key) or {}).get('policy', '')}")

        lines += [
            "",
            "**FACILITIES:**",
            f"• WiFi: {'Available - Network: ' + str(wifi.get('network')) if wifi.get('available') else 'Not available'}",
            "• Beer Garden: "
            + (f"Yes - {garden.get('capacity')}, {garden.get('heating')}" if garden.get("available") else "Not available"),
            f"• Accessibility: {'Wheelchair accessible' if access.get('wheelchair_access') else 'Not wheelchair accessible'}",
            "",
            "**PAYMENT & RESERVATIONS:**",
            f"• Payment methods: {', '.join(payment.get('methods', []))}",
            f"• Card minimum: {payment.get('minimum_card', '')}",
            f"• Reservations: {reservations.get('policy', '')}",
            f"• Large groups: {reservations.get('large_groups', '')}",
            "",
            "**LOCATION:**",
            f"• Address: {location.get('address', '')}",
            f"• Transport: {location.get('nearest_transport', '')}",
            f"• Parking: {location.get('parking', '')}",
        ]
        return "\n".join(lines)

    def _load(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        if not path.exists():
            self._logger.warning("Pub data file missing", extra={"reason": str(path)})
            return {}
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)


def _feature_lines(feature: dict[str, Any], optional_keys: tuple[str, ...]) -> list[str]:
    lines = [f"• {feature.get('name', '')}", f"  {feature.get('description', '')}"]
    for key in optional_keys:
        if key in feature:
            lines.append(f"  {key.capitalize()}: {feature[key]}")
    lines.append("")
    return lines
