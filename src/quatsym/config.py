"""
Symmetry Detection Parameters

Tunable thresholds, iteration caps and time budgets consulted by a
quaternary symmetry solver. The record carries no behavior beyond storing
the values, serialising them to JSON/YAML/TOML and printing them for
diagnostics; fields are independent and are not cross-validated.

Example:
    >>> params = SymmetryParameters()
    >>> params.angle_threshold = 15.0
    >>> params.get('rmsd_threshold')
    7.0
"""

import json
import warnings
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class SymmetryParameters:
    """Parameter record for quaternary symmetry detection."""

    rmsd_threshold: float = 7.0
    # Maximum angle deviation for the C2 solver (degrees)
    angle_threshold: float = 10.0
    # Helical symmetry wins over cyclic if
    # Rmsd(helical) - Rmsd(cyclic) <= helix_rmsd_threshold
    helix_rmsd_threshold: float = 0.05
    # RMSD must be below this fraction of |rise|
    helix_rmsd_to_rise_ratio: float = 0.5
    minimum_helix_rise: float = 1.0
    # Smaller helix angles are treated as a translational repeat (degrees)
    minimum_helix_angle: float = 5.0
    maximum_local_combinations: int = 50000
    maximum_local_results: int = 1000
    maximum_local_subunits: int = 20
    # Time limit for local symmetry calculations (seconds)
    local_time_limit: float = 120.0
    on_the_fly: bool = True

    @classmethod
    def field_names(cls) -> List[str]:
        """Parameter names in declaration order."""
        return [f.name for f in fields(cls)]

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a parameter by name.

        Args:
            key: Field name (e.g., 'angle_threshold')
            default: Returned if the field does not exist

        Returns:
            value: Parameter value
        """
        if key not in self.field_names():
            return default
        return getattr(self, key)

    def set(self, key: str, value: Any) -> None:
        """
        Set a parameter by name.

        Raises:
            KeyError: If no such parameter exists
        """
        if key not in self.field_names():
            raise KeyError(f"Unknown parameter: {key}")
        setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        """Export parameters as a dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'SymmetryParameters':
        """
        Build parameters from a dictionary; missing keys keep their defaults.

        Unknown keys are skipped with a warning.
        """
        names = cls.field_names()
        unknown = sorted(set(params) - set(names))
        if unknown:
            warnings.warn(f"Ignoring unknown parameters: {', '.join(unknown)}")
        return cls(**{k: v for k, v in params.items() if k in names})

    def save(self, filename: str) -> None:
        """
        Save parameters to file.

        Supports .json, .yaml, .toml formats based on extension.

        Example:
            >>> params.save('symmetry.yaml')
        """
        path = Path(filename)
        suffix = path.suffix.lower()

        if suffix == '.json':
            with open(path, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)

        elif suffix in ['.yaml', '.yml']:
            try:
                import yaml
            except ImportError:
                raise ImportError("PyYAML required. Install with: pip install pyyaml")
            with open(path, 'w') as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False,
                               sort_keys=False)

        elif suffix == '.toml':
            try:
                import toml
            except ImportError:
                raise ImportError("toml required. Install with: pip install toml")
            with open(path, 'w') as f:
                toml.dump(self.to_dict(), f)

        else:
            raise ValueError(f"Unsupported format: {suffix}. Use .json, .yaml, or .toml")

    @classmethod
    def load(cls, filename: str) -> 'SymmetryParameters':
        """
        Load parameters from file (.json, .yaml, .toml).

        Example:
            >>> params = SymmetryParameters.load('symmetry.yaml')
        """
        path = Path(filename)

        if not path.exists():
            raise FileNotFoundError(f"Parameter file not found: {filename}")

        suffix = path.suffix.lower()

        if suffix == '.json':
            with open(path, 'r') as f:
                params = json.load(f)

        elif suffix in ['.yaml', '.yml']:
            try:
                import yaml
            except ImportError:
                raise ImportError("PyYAML required. Install with: pip install pyyaml")
            with open(path, 'r') as f:
                params = yaml.safe_load(f) or {}

        elif suffix == '.toml':
            try:
                import toml
            except ImportError:
                raise ImportError("toml required. Install with: pip install toml")
            with open(path, 'r') as f:
                params = toml.load(f)

        else:
            raise ValueError(f"Unsupported format: {suffix}")

        return cls.from_dict(params)

    def __str__(self) -> str:
        """Diagnostic dump of every parameter."""
        body = ", ".join(f"{name}={getattr(self, name)}" for name in self.field_names())
        return f"SymmetryParameters [{body}]"


def load_parameters_with_overrides(config_file: Optional[str] = None,
                                   **overrides) -> SymmetryParameters:
    """
    Load parameters from an optional file, then apply keyword overrides.

    Example:
        >>> params = load_parameters_with_overrides(
        ...     'symmetry.toml',
        ...     local_time_limit=30.0,
        ... )
    """
    if config_file is not None:
        params = SymmetryParameters.load(config_file)
    else:
        params = SymmetryParameters()

    for key, value in overrides.items():
        params.set(key, value)

    return params
