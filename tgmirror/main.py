import json
import logging
from typing import Optional

import click
from flask import Flask

from tgmirror.api.webhook import api
from tgmirror.config import Settings
from tgmirror.mirror.pipeline import MirrorPipeline, build_pipeline


# ================================
# APP FACTORY
# ================================
def create_app(settings: Optional[Settings] = None, pipeline: Optional[MirrorPipeline] = None) -> Flask:
    settings = settings or (pipeline.settings if pipeline else Settings.from_env())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s:%(message)s",
    )

    app = Flask(__name__)
    app.extensions["tgmirror"] = pipeline or build_pipeline(settings)
    app.register_blueprint(api)

    # ================================
    # CLI (for cron)
    # ================================
    @app.cli.command("tick")
    def tick_command() -> None:
        """Run one dispatcher tick."""
        result = app.extensions["tgmirror"].on_tick()
        click.echo(json.dumps(result.to_dict()))

    @app.cli.command("dump")
    def dump_command() -> None:
        """Print the index and queue contents."""
        click.echo(json.dumps(app.extensions["tgmirror"].dump(), indent=2))

    logging.info(
        "TG Mirror ready (storage=%s, backfill chats=%s)",
        settings.storage_backend,
        ",".join(settings.backfill_chats) or "-",
    )
    return app
