"""Command line interface for pullcaps."""
