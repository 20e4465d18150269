from __future__ import annotations

import json

import click
from flask import Flask, current_app

from app.extensions.storage import get_collection_store
from app.services.reminder_service import ReminderService
from app.services.sample_data_service import SampleDataService


def register_savings_commands(app: Flask) -> None:
    @app.cli.group("savings")
    def savings_group() -> None:
        """Operational commands for the savings ledger."""

    @savings_group.command("generate-reminders")
    def generate_reminders() -> None:
        service = ReminderService(get_collection_store())
        created = service.generate_for_goals()
        current_app.logger.info("cli_reminders_generated count=%s", len(created))
        payload = {
            "created": len(created),
            "goal_ids": sorted({reminder.goal_id for reminder in created}),
        }
        click.echo(json.dumps(payload, sort_keys=True))

    @savings_group.command("seed-sample-data")
    def seed_sample_data() -> None:
        result = SampleDataService(get_collection_store()).seed()
        if result is None:
            click.echo(json.dumps({"seeded": False}))
            return
        payload = {
            "seeded": True,
            "goals": len(result.goals),
            "challenges": len(result.challenges),
        }
        click.echo(json.dumps(payload, sort_keys=True))

    @savings_group.command("store-info")
    def store_info() -> None:
        store = get_collection_store()
        click.echo(json.dumps({"backend": store.backend_name}))
