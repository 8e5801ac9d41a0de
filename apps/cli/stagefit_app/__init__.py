"""Command line app for StageFit bitmap sizing and import."""
