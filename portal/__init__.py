"""Admin portal: account provisioning and session continuity service."""
