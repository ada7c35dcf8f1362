"""Script entry point for the N-Queens search tracer.

Examples
--------
    python algo.py solve 8 --seed 7 --validate
    python algo.py --alg HC solve 20 --plot
    python algo.py --config config.json bench --mode sequential
    python algo.py --quick-test
"""

from nqueens_trace.analysis.cli import main


if __name__ == "__main__":
    main()
