"""Application layer: provisioning services, DTOs and ports."""
