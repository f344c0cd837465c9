"""Scene data model and ingestion of plain scene records (dicts / JSON files).

Record layout::

    {
        "camera": {"prp": [x, y, z], "srp": [x, y, z], "vup": [x, y, z],
                   "clip": [umin, umax, vmin, vmax, front, back]},
        "models": [
            {"type": "generic", "vertices": [[x, y, z], ...], "edges": [[0, 1, 2, 0], ...],
             "center": [x, y, z], "animation": {"axis": "y", "rps": 0.5},
             "transform": {"translate": [...], "rotate": {"axis": "x", "angle": 0.3},
                           "scale": [...]}},
            {"type": "cube", "center": [...], "width": 2, "height": 2, "depth": 2},
            {"type": "cylinder" | "cone", "center": [...], "radius": r, "height": h, "sides": n},
            {"type": "sphere", "center": [...], "radius": r, "slices": n, "stacks": m}
        ]
    }

``view`` is accepted in place of ``camera``. Every problem is reported as
InvalidSceneError.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Sequence

from wireframe_tools.constants import DEFAULT_SIDES, DEFAULT_SLICES, DEFAULT_STACKS
from wireframe_tools.errors import ConfigurationError, InvalidSceneError
from wireframe_tools.rendering.camera import Camera, validate_camera
from wireframe_tools.rendering.primitives import Edge, Mesh, MeshKind, build_mesh
from wireframe_tools.rendering.transforms import axis_vector, compose_rigid
from wireframe_tools.rendering.vec_math import Matrix, Vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Animation:
    """Continuous rotation about the model's center."""

    axis: Vector  # unit 3-vector
    rps: float  # revolutions per second


@dataclass(frozen=True)
class Model:
    """Wireframe model with its accumulated transform."""

    vertices: tuple[Vector, ...]
    edges: tuple[Edge, ...]
    center: Vector
    matrix: Matrix = field(default_factory=Matrix.identity)
    animation: Animation | None = None
    kind: MeshKind = MeshKind.GENERIC

    @property
    def world_center(self) -> Vector:
        """Center after the accumulated matrix; the pivot for self-rotation."""
        return (self.matrix @ self.center.to_point()).xyz  # type: ignore[union-attr]

    def with_matrix(self, matrix: Matrix) -> Model:
        return replace(self, matrix=matrix)

    def with_animation(self, animation: Animation | None) -> Model:
        return replace(self, animation=animation)


@dataclass(frozen=True)
class Scene:
    """Camera plus ordered models; a snapshot, replaced wholesale on change."""

    camera: Camera
    models: tuple[Model, ...] = ()

    def with_camera(self, camera: Camera) -> Scene:
        return replace(self, camera=camera)

    def with_model(self, index: int, model: Model) -> Scene:
        """Scene with models[index] replaced.

        Raises:
            IndexError: If index is out of range.
        """
        if not 0 <= index < len(self.models):
            raise IndexError(f'model index {index} out of range (0..{len(self.models) - 1})')
        models = list(self.models)
        models[index] = model
        return replace(self, models=tuple(models))


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------


def _require(record: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(record, Mapping):
        raise InvalidSceneError(f'{where}: expected an object, got {type(record).__name__}')
    if key not in record or record[key] is None:
        raise InvalidSceneError(f'{where}: missing required field {key!r}')
    return record[key]


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool):
        raise InvalidSceneError(f'{where}: expected a number, got {value!r}')
    try:
        num = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidSceneError(f'{where}: expected a number, got {value!r}') from e
    if not math.isfinite(num):
        raise InvalidSceneError(f'{where}: must be finite, got {value!r}')
    return num


def _numbers(value: Any, where: str, sizes: Sequence[int]) -> list[float]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidSceneError(f'{where}: expected a list of numbers, got {value!r}')
    if len(value) not in sizes:
        expected = ' or '.join(str(s) for s in sizes)
        raise InvalidSceneError(f'{where}: expected {expected} numbers, got {len(value)}')
    return [_number(v, f'{where}[{i}]') for i, v in enumerate(value)]


def _vec3(value: Any, where: str) -> Vector:
    return Vector(_numbers(value, where, (3,)))


def _count(value: Any, where: str) -> int:
    num = _number(value, where)
    if num != int(num):
        raise InvalidSceneError(f'{where}: expected an integer, got {value!r}')
    return int(num)


def camera_from_dict(record: Mapping[str, Any]) -> Camera:
    """Camera from a {prp, srp, vup, clip} record, validated.

    Raises:
        InvalidSceneError: Missing/malformed fields, bad clip bounds, or a
            degenerate view basis.
    """
    where = 'camera'
    camera = Camera(
        prp=_vec3(_require(record, 'prp', where), f'{where}.prp'),
        srp=_vec3(_require(record, 'srp', where), f'{where}.srp'),
        vup=_vec3(_require(record, 'vup', where), f'{where}.vup'),
        clip=tuple(_numbers(_require(record, 'clip', where), f'{where}.clip', (6,))),  # type: ignore[arg-type]
    )
    try:
        validate_camera(camera)
    except ConfigurationError as e:
        raise InvalidSceneError(f'{where}: {e}') from e
    return camera


def _edges(value: Any, nverts: int, where: str) -> list[list[int]]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidSceneError(f'{where}: expected a list of index lists')
    edges: list[list[int]] = []
    for i, edge in enumerate(value):
        ewhere = f'{where}[{i}]'
        if isinstance(edge, (str, bytes)) or not isinstance(edge, Sequence) or len(edge) < 2:
            raise InvalidSceneError(f'{ewhere}: expected at least two vertex indices')
        indices = [_count(idx, f'{ewhere}') for idx in edge]
        for idx in indices:
            if not 0 <= idx < nverts:
                raise InvalidSceneError(
                    f'{ewhere}: vertex index {idx} out of range (model has {nverts} vertices)'
                )
        edges.append(indices)
    return edges


def _mesh_from_dict(kind: MeshKind, record: Mapping[str, Any], where: str) -> Mesh:
    if kind is MeshKind.GENERIC:
        raw_vertices = _require(record, 'vertices', where)
        if isinstance(raw_vertices, (str, bytes)) or not isinstance(raw_vertices, Sequence):
            raise InvalidSceneError(f'{where}.vertices: expected a list of points')
        vertices = [
            _numbers(v, f'{where}.vertices[{i}]', (3, 4))[:3] for i, v in enumerate(raw_vertices)
        ]
        edges = _edges(_require(record, 'edges', where), len(vertices), f'{where}.edges')
        center = record.get('center')
        params: dict[str, Any] = {
            'vertices': vertices,
            'edges': edges,
            'center': None if center is None else list(_vec3(center, f'{where}.center')),
        }
    else:
        params = {'center': list(_vec3(_require(record, 'center', where), f'{where}.center'))}
        if kind is MeshKind.CUBE:
            for key in ('width', 'height', 'depth'):
                params[key] = _number(_require(record, key, where), f'{where}.{key}')
        elif kind in (MeshKind.CYLINDER, MeshKind.CONE):
            for key in ('radius', 'height'):
                params[key] = _number(_require(record, key, where), f'{where}.{key}')
            params['sides'] = _count(record.get('sides', DEFAULT_SIDES), f'{where}.sides')
        else:
            params['radius'] = _number(_require(record, 'radius', where), f'{where}.radius')
            params['slices'] = _count(record.get('slices', DEFAULT_SLICES), f'{where}.slices')
            params['stacks'] = _count(record.get('stacks', DEFAULT_STACKS), f'{where}.stacks')
    try:
        return build_mesh(kind, **params)
    except ValueError as e:
        raise InvalidSceneError(f'{where}: {e}') from e


def _animation_from_dict(record: Any, where: str) -> Animation:
    axis = _require(record, 'axis', where)
    rps = _number(_require(record, 'rps', where), f'{where}.rps')
    try:
        return Animation(axis=axis_vector(axis), rps=rps)
    except ConfigurationError as e:
        raise InvalidSceneError(f'{where}.axis: {e}') from e


def _transform_from_dict(record: Any, where: str) -> Matrix:
    if not isinstance(record, Mapping):
        raise InvalidSceneError(f'{where}: expected an object')
    translate = _numbers(record.get('translate', [0, 0, 0]), f'{where}.translate', (3,))
    scale = _numbers(record.get('scale', [1, 1, 1]), f'{where}.scale', (3,))
    rotate = record.get('rotate')
    axis: Any = 'y'
    angle = 0.0
    if rotate is not None:
        axis = _require(rotate, 'axis', f'{where}.rotate')
        angle = _number(_require(rotate, 'angle', f'{where}.rotate'), f'{where}.rotate.angle')
    try:
        return compose_rigid(translate, axis, angle, scale)
    except ConfigurationError as e:
        raise InvalidSceneError(f'{where}: {e}') from e


def model_from_dict(record: Mapping[str, Any], index: int = 0) -> Model:
    """Model from a scene model record, validated.

    Raises:
        InvalidSceneError: If the record is malformed.
    """
    where = f'models[{index}]'
    if not isinstance(record, Mapping):
        raise InvalidSceneError(f'{where}: expected an object, got {type(record).__name__}')
    type_name = str(record.get('type', 'generic')).strip().lower()
    try:
        kind = MeshKind(type_name)
    except ValueError as e:
        known = ', '.join(k.value for k in MeshKind)
        raise InvalidSceneError(f'{where}: unknown model type {type_name!r} ({known})') from e
    mesh = _mesh_from_dict(kind, record, where)
    matrix = Matrix.identity()
    if record.get('transform') is not None:
        matrix = _transform_from_dict(record['transform'], f'{where}.transform')
    animation = None
    if record.get('animation') is not None:
        animation = _animation_from_dict(record['animation'], f'{where}.animation')
    return Model(
        vertices=mesh.vertices,
        edges=mesh.edges,
        center=mesh.center,
        matrix=matrix,
        animation=animation,
        kind=kind,
    )


def scene_from_dict(record: Mapping[str, Any]) -> Scene:
    """Scene from a plain record.

    Raises:
        InvalidSceneError: If any part of the record is invalid.
    """
    if not isinstance(record, Mapping):
        raise InvalidSceneError(f'scene: expected an object, got {type(record).__name__}')
    camera_record = record.get('camera', record.get('view'))
    if camera_record is None:
        raise InvalidSceneError("scene: missing required field 'camera'")
    camera = camera_from_dict(camera_record)
    raw_models = record.get('models', [])
    if isinstance(raw_models, (str, bytes)) or not isinstance(raw_models, Sequence):
        raise InvalidSceneError('scene: models must be a list')
    models = tuple(model_from_dict(m, i) for i, m in enumerate(raw_models))
    logger.debug('Loaded scene with %d models', len(models))
    return Scene(camera=camera, models=models)


def load_scene(path: str | Path) -> Scene:
    """Read and validate a JSON scene file.

    Raises:
        OSError: If the file cannot be read.
        InvalidSceneError: If the JSON is malformed or the scene invalid.
    """
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        try:
            record = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidSceneError(f'{path}: invalid JSON: {e}') from e
    logger.info('Loading scene from %s', path)
    return scene_from_dict(record)
