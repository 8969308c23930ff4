"""External collaborators: mail transport and outbound HTTP."""
