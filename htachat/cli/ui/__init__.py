"""Rich/questionary rendering for the terminal client."""
