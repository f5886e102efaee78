# finance_tracker/outputs/json_output.py

import json
import logging
import os

from finance_tracker.outputs.base import BaseOutput

logger = logging.getLogger(__name__)


class JSONOutput(BaseOutput):
    """
    Writes the full financial state, derived figures included, to
    financial-data-<date>.json.
    """
    def __init__(self, config):
        self.config     = config
        self.output_dir = config.get('export_dir', 'exports')
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, state, today):
        out_path = os.path.join(self.output_dir, self.filename(today, 'json'))
        with open(out_path, 'w', encoding='utf-8') as f:
            json.dump(state.to_dict(now=today), f, indent=2)
        logger.info("Exported %d transaction(s) to %s", len(state.transactions), out_path)
        return out_path
