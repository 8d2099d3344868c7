#!/usr/bin/env python3
"""
Run a bullet screen on a simulated clock.

Feeds messages into a BulletScreen at a fixed rate, steps frames, and logs
placements, queueing and finishes. Useful to watch lane scheduling behave
without a display attached.
"""

import argparse
import json
import logging
import os
import sys

# Add project directory to Python path (needed before importing bulletlanes)
project_dir = os.path.dirname(os.path.abspath(__file__))
if project_dir not in sys.path:
    sys.path.insert(0, project_dir)

parser = argparse.ArgumentParser(description='Bullet screen lane scheduler demo')
parser.add_argument('-c', '--config', help='JSON config file with a "bullet_screen" section')
parser.add_argument('-m', '--messages', help='Text file, one message per line')
parser.add_argument('--width', type=int, default=640, help='Viewport width in pixels')
parser.add_argument('--height', type=int, default=240, help='Viewport height in pixels')
parser.add_argument('--seconds', type=float, default=30.0, help='Simulated run time')
parser.add_argument('--fps', type=int, default=30, help='Simulated frames per second')
parser.add_argument('--rate', type=float, default=4.0, help='Messages submitted per second')
parser.add_argument('--save-frame', help='Write the last rendered frame to this PNG path')
parser.add_argument('--json-logs', action='store_true', help='Emit structured JSON logs')
parser.add_argument('-d', '--debug', action='store_true', help='Enable debug logging')
args = parser.parse_args()

from bulletlanes.logging_config import setup_logging

debug_mode = args.debug or os.environ.get('BULLETLANES_DEBUG', '').lower() == 'true'
setup_logging(
    level=logging.DEBUG if debug_mode else logging.INFO,
    format_type='json' if args.json_logs else 'readable',
    include_location=debug_mode,
)

from bulletlanes import BulletScreen, ScreenOptions, Surface
from bulletlanes.exceptions import BulletLanesError
from bulletlanes.render import FrameRenderer

logger = logging.getLogger('run')

SAMPLE_MESSAGES = [
    'first!',
    'this part is great',
    'lol',
    'can someone explain what just happened',
    '<b>wow</b>',
    'again again again',
    'hello from the back row',
    '8/10 would watch again',
]


class SimulatedClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def load_config(path):
    if not path:
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_messages(path):
    if not path:
        return SAMPLE_MESSAGES
    with open(path, 'r', encoding='utf-8') as f:
        messages = [line.rstrip('\n') for line in f if line.strip()]
    if not messages:
        logger.warning("No messages in %s, using the built-in sample", path)
        return SAMPLE_MESSAGES
    return messages


def main() -> int:
    try:
        options = ScreenOptions.from_config(load_config(args.config))
        messages = load_messages(args.messages)
    except (IOError, OSError, ValueError) as e:
        logger.error("Could not load input: %s", e)
        return 1

    finished = []
    options = options.merged({'on_end': lambda item_id, screen: finished.append(item_id)})

    clock = SimulatedClock()
    try:
        screen = BulletScreen(Surface('demo', args.width, args.height), options, clock=clock)
    except BulletLanesError as e:
        logger.error("Could not create screen: %s", e)
        return 1

    renderer = FrameRenderer(args.width, args.height)
    frame_time = 1.0 / max(1, args.fps)
    submit_every = 1.0 / args.rate if args.rate > 0 else float('inf')
    next_submit = 0.0
    submitted = placed = 0

    while clock.now < args.seconds:
        if clock.now >= next_submit:
            item_id = screen.submit(messages[submitted % len(messages)])
            submitted += 1
            placed += item_id is not None
            next_submit += submit_every
        screen.render_frame()
        clock.now += frame_time

    renderer.render_screen(screen)
    if args.save_frame:
        renderer.save(args.save_frame)

    status = screen.get_status()
    logger.info(
        "Submitted %d, placed directly %d, finished %d, still active %d, queued %d",
        submitted, placed, len(finished), status['active_items'], status['queue']['waiting']
    )
    screen.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
