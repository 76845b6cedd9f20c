"""Flask application factory for the simulator's JSON API.

The ``create_app`` function creates (or accepts) a controller and
returns a Flask app whose endpoints forward to it.  Every response is
JSON; the web page owns all drawing, animation and sound.

Errors map to status codes by kind:

- bad input (reference string, frames, policy)  → 400
- lifecycle misuse (step while paused, ...)     → 409
- policy invariant violation (a logic defect)   → 500
"""

from __future__ import annotations

import threading
from typing import Any

from flask import Flask, Response, jsonify, request

from py_paging.controller import SimulationController, StepEvent
from py_paging.engine import InvalidConfigurationError, SimulationStateError
from py_paging.logging import LogLevel
from py_paging.memory.policies import PolicyInvariantViolationError
from py_paging.references import (
    DEFAULT_FRAME_COUNT,
    DEFAULT_POLICY,
    ReferenceInputError,
    input_warnings,
    parse_frame_count,
    parse_policy,
    parse_reference_string,
    validate_references,
)
from py_paging.stats import Summary

_HTTP_BAD_REQUEST = 400
_HTTP_CONFLICT = 409
_HTTP_SERVER_ERROR = 500

_SOURCE = "web"


def serialize_event(event: StepEvent) -> dict[str, Any]:
    """Convert a StepEvent into JSON-ready data."""
    result = event.result
    return {
        "position": event.position,
        "page": event.page,
        "result": type(result).__name__,
        "fault": event.is_fault,
        "frame": getattr(result, "frame_index", None),
        "evicted": getattr(result, "evicted_page", None),
        "frames_before": list(event.frames_before),
        "frames": list(event.frames),
        "hits": event.hits,
        "faults": event.faults,
        "state": str(event.state),
        "explanation": event.explanation(),
    }


def serialize_summary(summary: Summary) -> dict[str, Any]:
    """Convert a Summary into JSON-ready data."""
    return {
        "policy": summary.policy,
        "total_references": summary.total_references,
        "hits": summary.hits,
        "faults": summary.faults,
        "hit_ratio": summary.hit_ratio,
        "fault_ratio": summary.fault_ratio,
        "completed": summary.completed,
    }


def serialize_state(controller: SimulationController) -> dict[str, Any]:
    """Describe the controller's engine as JSON-ready data."""
    engine = controller.engine
    return {
        "state": str(engine.state),
        "policy": engine.policy,
        "capacity": engine.capacity,
        "sequence": list(engine.sequence),
        "step_index": engine.step_index,
        "current_page": engine.current_page,
        "frames": list(engine.frames),
        "policy_state": [
            list(entry) if isinstance(entry, tuple) else entry for entry in engine.policy_state
        ],
        "hits": engine.hit_count,
        "faults": engine.fault_count,
        "error": str(engine.error) if engine.error is not None else None,
    }


def _error(exc: Exception, status: int) -> tuple[Response, int]:
    """Build a JSON error response."""
    return jsonify({"error": str(exc)}), status


def create_app(controller: SimulationController | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        controller: The controller to serve.  A new one is created if
            omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    sim = controller if controller is not None else SimulationController()
    # The dev server is threaded; one request at a time drives the engine.
    lock = threading.Lock()
    app = Flask(__name__)

    @app.errorhandler(ReferenceInputError)
    @app.errorhandler(InvalidConfigurationError)
    def bad_input(exc: ValueError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Report unusable simulation input."""
        return _error(exc, _HTTP_BAD_REQUEST)

    @app.errorhandler(SimulationStateError)
    def wrong_state(exc: SimulationStateError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Report an operation that the current state does not allow."""
        return _error(exc, _HTTP_CONFLICT)

    @app.errorhandler(PolicyInvariantViolationError)
    def invariant(exc: PolicyInvariantViolationError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Report a stuck simulation."""
        return _error(exc, _HTTP_SERVER_ERROR)

    @app.route("/")
    def index() -> Response:  # pyright: ignore[reportUnusedFunction]
        """List the available endpoints."""
        endpoints = sorted(
            str(rule) for rule in app.url_map.iter_rules() if str(rule).startswith("/api/")
        )
        return jsonify({"name": "py-paging", "endpoints": endpoints})

    @app.route("/api/start", methods=["POST"])
    def start() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Validate input and start a run.

        Expects JSON body::

            {"references": "A B C" | ["A", "B"], "frames": 3,
             "policy": "FIFO", "force": false}

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "references" not in data:
            return jsonify({"error": "Missing 'references' field"}), _HTTP_BAD_REQUEST

        raw = data["references"]
        references = (
            validate_references(raw) if isinstance(raw, list) else parse_reference_string(str(raw))
        )
        frames = parse_frame_count(data.get("frames", DEFAULT_FRAME_COUNT))
        policy = parse_policy(str(data.get("policy", DEFAULT_POLICY)))

        warnings = input_warnings(references, frames)
        if warnings and not data.get("force", False):
            return jsonify({"started": False, "warnings": warnings})

        with lock:
            for warning in warnings:
                sim.logger.warning(warning, source=_SOURCE)
            sim.start(references, frames, policy)
            return jsonify({"started": True, "warnings": warnings, "state": serialize_state(sim)})

    @app.route("/api/step", methods=["POST"])
    def step() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Advance one reference."""
        with lock:
            event = sim.step()
            return jsonify({"event": serialize_event(event), "state": serialize_state(sim)})

    @app.route("/api/run", methods=["POST"])
    def run() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run the remaining references to completion."""
        with lock:
            events = sim.run_to_completion()
            return jsonify(
                {
                    "events": [serialize_event(e) for e in events],
                    "summary": serialize_summary(sim.summary()),
                    "state": serialize_state(sim),
                }
            )

    @app.route("/api/pause", methods=["POST"])
    def pause() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Pause the run."""
        with lock:
            sim.pause()
            return jsonify(serialize_state(sim))

    @app.route("/api/resume", methods=["POST"])
    def resume() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Resume a paused run."""
        with lock:
            sim.resume()
            return jsonify(serialize_state(sim))

    @app.route("/api/reset", methods=["POST"])
    def reset() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Discard the run."""
        with lock:
            sim.reset()
            return jsonify(serialize_state(sim))

    @app.route("/api/state")
    def state() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the full simulation state."""
        with lock:
            return jsonify(serialize_state(sim))

    @app.route("/api/summary")
    def summary() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return totals and ratios so far."""
        with lock:
            return jsonify(serialize_summary(sim.summary()))

    @app.route("/api/log")
    def log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return log entries, optionally ``?level=info`` and above."""
        level_name = request.args.get("level")
        min_level = None
        if level_name is not None:
            try:
                min_level = LogLevel[level_name.upper()]
            except KeyError:
                return jsonify({"error": f"Unknown level '{level_name}'"}), _HTTP_BAD_REQUEST
        with lock:
            entries = sim.logger.filter(min_level=min_level)
        return jsonify(
            [{"level": e.level.name, "source": e.source, "message": e.message} for e in entries]
        )

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-paging-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
