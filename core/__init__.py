"""core/ -- Configuration, error taxonomy and database plumbing. Imports nothing else in the project."""
