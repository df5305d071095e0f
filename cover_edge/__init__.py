"""cover-edge: natural-language spread bets to sized recommendations.

Entry point::

    from cover_edge.services.orchestrator import analyze_and_log

    report = analyze_and_log("NFL: Cowboys vs Eagles, Eagles +2.5, I'm taking Eagles")
    print(report.summary)

Callers that already hold structured stats can use :mod:`cover_edge.core`
directly.
"""

__version__ = "0.1.0"
