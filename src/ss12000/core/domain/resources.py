"""Tabla declarativa de familias de recursos SS12000.

Por qué una tabla:
- Las ~90 operaciones del API son la misma forma (verbo, path, parámetros)
  repetida; aquí quedan como datos y un único dispatcher las ejecuta.
- La asimetría entre familias (sin lookup, sin expand, solo algunas con
  create/delete/update) es la superficie real de la API y se conserva tal cual.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote


class Operation(str, Enum):
    LIST = "list"
    LOOKUP = "lookup"
    GET = "get"
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


_READ = frozenset({Operation.LIST, Operation.LOOKUP, Operation.GET})
_READ_NO_LOOKUP = frozenset({Operation.LIST, Operation.GET})
_LIST_ONLY = frozenset({Operation.LIST})
_RECORDED = _READ | {Operation.CREATE, Operation.DELETE}


@dataclass(frozen=True)
class ResourceSpec:
    """Una familia de recursos y sus capacidades."""

    name: str
    path: str
    operations: frozenset[Operation]
    expandable: bool = False
    # create devuelve la representación creada (True) o nada (False).
    create_returns_content: bool = False

    def supports(self, operation: Operation) -> bool:
        return operation in self.operations

    @property
    def lookup_path(self) -> str:
        return f"{self.path}/lookup"

    def item_path(self, resource_id: str) -> str:
        return f"{self.path}/{quote(str(resource_id), safe='')}"


ORGANISATIONS = ResourceSpec("organisations", "/organisations", _READ)
PERSONS = ResourceSpec("persons", "/persons", _READ, expandable=True)
PLACEMENTS = ResourceSpec("placements", "/placements", _READ, expandable=True)
DUTIES = ResourceSpec("duties", "/duties", _READ, expandable=True)
GROUPS = ResourceSpec("groups", "/groups", _READ, expandable=True)
PROGRAMMES = ResourceSpec("programmes", "/programmes", _READ)
STUDY_PLANS = ResourceSpec("studyplans", "/studyplans", _READ_NO_LOOKUP, expandable=True)
SYLLABUSES = ResourceSpec("syllabuses", "/syllabuses", _READ)
SCHOOL_UNIT_OFFERINGS = ResourceSpec("schoolUnitOfferings", "/schoolUnitOfferings", _READ)
ACTIVITIES = ResourceSpec("activities", "/activities", _READ, expandable=True)
CALENDAR_EVENTS = ResourceSpec("calendarEvents", "/calendarEvents", _READ, expandable=True)
ATTENDANCES = ResourceSpec("attendances", "/attendances", _RECORDED, expandable=True)
ATTENDANCE_EVENTS = ResourceSpec("attendanceEvents", "/attendanceEvents", _RECORDED, expandable=True)
ATTENDANCE_SCHEDULES = ResourceSpec("attendanceSchedules", "/attendanceSchedules", _RECORDED, expandable=True)
GRADES = ResourceSpec("grades", "/grades", _READ, expandable=True)
ABSENCES = ResourceSpec("absences", "/absences", _RECORDED)
AGGREGATED_ATTENDANCE = ResourceSpec(
    "aggregatedAttendance", "/aggregatedAttendance", _READ_NO_LOOKUP, expandable=True
)
BOOKABLE_RESOURCES = ResourceSpec("resources", "/resources", _READ)
ROOMS = ResourceSpec("rooms", "/rooms", _READ)
SUBSCRIPTIONS = ResourceSpec(
    "subscriptions",
    "/subscriptions",
    frozenset({Operation.LIST, Operation.GET, Operation.CREATE, Operation.DELETE, Operation.UPDATE}),
    create_returns_content=True,
)
DELETED_ENTITIES = ResourceSpec("deletedEntities", "/deletedEntities", _LIST_ONLY)
LOG = ResourceSpec("log", "/log", _LIST_ONLY)
STATISTICS = ResourceSpec("statistics", "/statistics", _LIST_ONLY)

RESOURCES: tuple[ResourceSpec, ...] = (
    ORGANISATIONS,
    PERSONS,
    PLACEMENTS,
    DUTIES,
    GROUPS,
    PROGRAMMES,
    STUDY_PLANS,
    SYLLABUSES,
    SCHOOL_UNIT_OFFERINGS,
    ACTIVITIES,
    CALENDAR_EVENTS,
    ATTENDANCES,
    ATTENDANCE_EVENTS,
    ATTENDANCE_SCHEDULES,
    GRADES,
    ABSENCES,
    AGGREGATED_ATTENDANCE,
    BOOKABLE_RESOURCES,
    ROOMS,
    SUBSCRIPTIONS,
    DELETED_ENTITIES,
    LOG,
    STATISTICS,
)

RESOURCES_BY_NAME: dict[str, ResourceSpec] = {spec.name: spec for spec in RESOURCES}


def get_resource(name: str) -> ResourceSpec:
    """Busca una familia por su nombre en la API (`calendarEvents`).

    Si no hay coincidencia exacta se compara sin mayúsculas (`calendarevents`),
    cómodo para la CLI.
    """

    spec = RESOURCES_BY_NAME.get(name)
    if spec is not None:
        return spec
    lowered = name.lower()
    for candidate in RESOURCES:
        if candidate.name.lower() == lowered:
            return candidate
    raise KeyError(name)
