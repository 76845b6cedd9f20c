"""Browser-facing JSON API for the simulator.

This package provides a Flask application that exposes one
``SimulationController`` over HTTP, so a web page can drive the
simulation and draw its results.  It is an **optional** extra;
install with::

    pip install py-paging[web]

The ``create_app`` factory in ``app.py`` wires the endpoints:

- ``POST /api/start``: validate input and start a run.
- ``POST /api/step`` / ``POST /api/run``: advance the run.
- ``POST /api/pause`` / ``resume`` / ``reset``: lifecycle control.
- ``GET /api/state`` / ``summary`` / ``log``: read-only views.
"""
