"""Command line front end for ThermalPrint."""
