"""client/ -- Python consumer of the Taskboard REST API."""
