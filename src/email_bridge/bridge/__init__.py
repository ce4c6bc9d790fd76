"""Chat bridge glue for the email command."""
