from dataclasses import dataclass


@dataclass(frozen=True)
class DeploymentId:
    """
    Value Object for an opaque deployment identifier assigned by the remote service.
    Only non-emptiness is checked here; the remote service owns the format.
    """
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Deployment ID cannot be empty")

    def __str__(self):
        return self.value
