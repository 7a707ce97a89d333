"""Fachada de recursos SS12000.

Por qué así:
- `dispatch` es el único camino hacia el transporte: resuelve verbo + path
  desde la tabla `RESOURCES` y normaliza la query.
- Los métodos con nombre (`get_persons`, `delete_attendance`, ...) son una
  línea cada uno y solo exponen los parámetros que la familia soporta.

Uso:
    async with SS12000Client("https://some.server.se/v2.0", token) as client:
        page = await client.get_persons({"limit": 2}, QueryOptions(expand=["duties"]))
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from ss12000.adapters.transport import Transport
from ss12000.core.config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, ClientConfig, ClientSettings
from ss12000.core.domain import resources as r
from ss12000.core.domain.resources import Operation, ResourceSpec
from ss12000.core.errors import UnsupportedOperationError
from ss12000.core.interfaces.diagnostics import DiagnosticsSink
from ss12000.core.query import QueryOptions, build_list_query, build_query

Filters = Mapping[str, Any] | None
Expand = Sequence[str] | None


class SS12000Client:
    """Cliente asíncrono de la API SS12000.

    Cada método hace exactamente una request. El cliente no guarda estado por
    llamada, así que se puede usar desde varias tareas a la vez.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: str | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        config = ClientConfig.build(base_url, auth_token, timeout_seconds=timeout_seconds, user_agent=user_agent)
        self._transport = Transport(
            config,
            transport=transport,
            http_client=http_client,
            diagnostics=diagnostics,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings | None = None, **kwargs: Any) -> "SS12000Client":
        settings = settings or ClientSettings()
        config = settings.to_client_config()
        return cls(
            config.base_url,
            config.auth_token,
            timeout_seconds=config.timeout_seconds,
            user_agent=config.user_agent,
            **kwargs,
        )

    @property
    def config(self) -> ClientConfig:
        return self._transport.config

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "SS12000Client":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Dispatcher ---

    async def dispatch(
        self,
        spec: ResourceSpec,
        operation: Operation,
        *,
        resource_id: str | None = None,
        filters: Filters = None,
        options: QueryOptions | None = None,
        body: Any = None,
    ) -> Any:
        """Ejecuta `operation` sobre la familia `spec`.

        Raises:
            UnsupportedOperationError: la familia no expone la operación.
            ValueError: `expand` en una familia sin relaciones expandibles, o
                falta `resource_id`/`body` donde la operación lo exige.
        """

        if not spec.supports(operation):
            raise UnsupportedOperationError(spec.name, operation.value)
        options = options or QueryOptions()
        if options.expand and not spec.expandable:
            raise ValueError(f"Resource '{spec.name}' has no expandable relations")

        if operation is Operation.LIST:
            return await self._transport.invoke("GET", spec.path, build_list_query(filters, options))
        if operation is Operation.LOOKUP:
            _require(body, "body", spec, operation)
            query = build_query(options.expansion_only().to_params())
            return await self._transport.invoke("POST", spec.lookup_path, query, body)
        if operation is Operation.CREATE:
            _require(body, "body", spec, operation)
            if spec.create_returns_content:
                return await self._transport.invoke("POST", spec.path, None, body)
            await self._transport.invoke_void("POST", spec.path, None, body)
            return None

        _require(resource_id, "resource_id", spec, operation)
        item_path = spec.item_path(resource_id)
        if operation is Operation.GET:
            query = build_query(options.expansion_only().to_params())
            return await self._transport.invoke("GET", item_path, query)
        if operation is Operation.DELETE:
            await self._transport.invoke_void("DELETE", item_path)
            return None
        # Operation.UPDATE
        _require(body, "body", spec, operation)
        return await self._transport.invoke("PATCH", item_path, None, body)

    async def _list(self, spec: ResourceSpec, filters: Filters, options: QueryOptions | None) -> Any:
        return await self.dispatch(spec, Operation.LIST, filters=filters, options=options)

    async def _lookup(self, spec: ResourceSpec, body: Any, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        options = QueryOptions(expand=expand or (), expand_reference_names=expand_reference_names)
        return await self.dispatch(spec, Operation.LOOKUP, body=body, options=options)

    async def _get(self, spec: ResourceSpec, resource_id: str, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        options = QueryOptions(expand=expand or (), expand_reference_names=expand_reference_names)
        return await self.dispatch(spec, Operation.GET, resource_id=resource_id, options=options)

    # --- Organisations ---

    async def get_organisations(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ORGANISATIONS, filters, options)

    async def lookup_organisations(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ORGANISATIONS, body, expand_reference_names=expand_reference_names)

    async def get_organisation_by_id(self, org_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ORGANISATIONS, org_id, expand_reference_names=expand_reference_names)

    # --- Persons ---

    async def get_persons(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.PERSONS, filters, options)

    async def lookup_persons(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        """`body` lleva `ids` o `civicNos`."""
        return await self._lookup(r.PERSONS, body, expand, expand_reference_names)

    async def get_person_by_id(self, person_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.PERSONS, person_id, expand, expand_reference_names)

    # --- Placements ---

    async def get_placements(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.PLACEMENTS, filters, options)

    async def lookup_placements(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.PLACEMENTS, body, expand, expand_reference_names)

    async def get_placement_by_id(self, placement_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.PLACEMENTS, placement_id, expand, expand_reference_names)

    # --- Duties ---

    async def get_duties(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.DUTIES, filters, options)

    async def lookup_duties(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.DUTIES, body, expand, expand_reference_names)

    async def get_duty_by_id(self, duty_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.DUTIES, duty_id, expand, expand_reference_names)

    # --- Groups ---

    async def get_groups(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.GROUPS, filters, options)

    async def lookup_groups(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.GROUPS, body, expand, expand_reference_names)

    async def get_group_by_id(self, group_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.GROUPS, group_id, expand, expand_reference_names)

    # --- Programmes ---

    async def get_programmes(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.PROGRAMMES, filters, options)

    async def lookup_programmes(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.PROGRAMMES, body, expand_reference_names=expand_reference_names)

    async def get_programme_by_id(self, programme_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.PROGRAMMES, programme_id, expand_reference_names=expand_reference_names)

    # --- Study plans (sin lookup) ---

    async def get_study_plans(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.STUDY_PLANS, filters, options)

    async def get_study_plan_by_id(self, study_plan_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.STUDY_PLANS, study_plan_id, expand, expand_reference_names)

    # --- Syllabuses ---

    async def get_syllabuses(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.SYLLABUSES, filters, options)

    async def lookup_syllabuses(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.SYLLABUSES, body, expand_reference_names=expand_reference_names)

    async def get_syllabus_by_id(self, syllabus_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.SYLLABUSES, syllabus_id, expand_reference_names=expand_reference_names)

    # --- School unit offerings ---

    async def get_school_unit_offerings(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.SCHOOL_UNIT_OFFERINGS, filters, options)

    async def lookup_school_unit_offerings(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.SCHOOL_UNIT_OFFERINGS, body, expand_reference_names=expand_reference_names)

    async def get_school_unit_offering_by_id(self, offering_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.SCHOOL_UNIT_OFFERINGS, offering_id, expand_reference_names=expand_reference_names)

    # --- Activities ---

    async def get_activities(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ACTIVITIES, filters, options)

    async def lookup_activities(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ACTIVITIES, body, expand, expand_reference_names)

    async def get_activity_by_id(self, activity_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ACTIVITIES, activity_id, expand, expand_reference_names)

    # --- Calendar events ---

    async def get_calendar_events(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.CALENDAR_EVENTS, filters, options)

    async def lookup_calendar_events(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.CALENDAR_EVENTS, body, expand, expand_reference_names)

    async def get_calendar_event_by_id(self, event_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.CALENDAR_EVENTS, event_id, expand, expand_reference_names)

    # --- Attendances ---

    async def get_attendances(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ATTENDANCES, filters, options)

    async def lookup_attendances(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ATTENDANCES, body, expand, expand_reference_names)

    async def get_attendance_by_id(self, attendance_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ATTENDANCES, attendance_id, expand, expand_reference_names)

    async def create_attendance(self, body: Any) -> None:
        await self.dispatch(r.ATTENDANCES, Operation.CREATE, body=body)

    async def delete_attendance(self, attendance_id: str) -> None:
        await self.dispatch(r.ATTENDANCES, Operation.DELETE, resource_id=attendance_id)

    # --- Attendance events ---

    async def get_attendance_events(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ATTENDANCE_EVENTS, filters, options)

    async def lookup_attendance_events(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ATTENDANCE_EVENTS, body, expand, expand_reference_names)

    async def get_attendance_event_by_id(self, event_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ATTENDANCE_EVENTS, event_id, expand, expand_reference_names)

    async def create_attendance_event(self, body: Any) -> None:
        await self.dispatch(r.ATTENDANCE_EVENTS, Operation.CREATE, body=body)

    async def delete_attendance_event(self, event_id: str) -> None:
        await self.dispatch(r.ATTENDANCE_EVENTS, Operation.DELETE, resource_id=event_id)

    # --- Attendance schedules ---

    async def get_attendance_schedules(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ATTENDANCE_SCHEDULES, filters, options)

    async def lookup_attendance_schedules(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ATTENDANCE_SCHEDULES, body, expand, expand_reference_names)

    async def get_attendance_schedule_by_id(self, schedule_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ATTENDANCE_SCHEDULES, schedule_id, expand, expand_reference_names)

    async def create_attendance_schedule(self, body: Any) -> None:
        await self.dispatch(r.ATTENDANCE_SCHEDULES, Operation.CREATE, body=body)

    async def delete_attendance_schedule(self, schedule_id: str) -> None:
        await self.dispatch(r.ATTENDANCE_SCHEDULES, Operation.DELETE, resource_id=schedule_id)

    # --- Grades ---

    async def get_grades(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.GRADES, filters, options)

    async def lookup_grades(self, body: Any, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.GRADES, body, expand, expand_reference_names)

    async def get_grade_by_id(self, grade_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.GRADES, grade_id, expand, expand_reference_names)

    # --- Absences (sin expand) ---

    async def get_absences(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ABSENCES, filters, options)

    async def lookup_absences(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ABSENCES, body, expand_reference_names=expand_reference_names)

    async def get_absence_by_id(self, absence_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ABSENCES, absence_id, expand_reference_names=expand_reference_names)

    async def create_absence(self, body: Any) -> None:
        await self.dispatch(r.ABSENCES, Operation.CREATE, body=body)

    async def delete_absence(self, absence_id: str) -> None:
        await self.dispatch(r.ABSENCES, Operation.DELETE, resource_id=absence_id)

    # --- Aggregated attendance (sin lookup) ---

    async def get_aggregated_attendances(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.AGGREGATED_ATTENDANCE, filters, options)

    async def get_aggregated_attendance_by_id(self, attendance_id: str, *, expand: Expand = None, expand_reference_names: bool = False) -> Any:
        return await self._get(r.AGGREGATED_ATTENDANCE, attendance_id, expand, expand_reference_names)

    # --- Resources ---

    async def get_resources(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.BOOKABLE_RESOURCES, filters, options)

    async def lookup_resources(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.BOOKABLE_RESOURCES, body, expand_reference_names=expand_reference_names)

    async def get_resource_by_id(self, resource_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.BOOKABLE_RESOURCES, resource_id, expand_reference_names=expand_reference_names)

    # --- Rooms ---

    async def get_rooms(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.ROOMS, filters, options)

    async def lookup_rooms(self, body: Any, *, expand_reference_names: bool = False) -> Any:
        return await self._lookup(r.ROOMS, body, expand_reference_names=expand_reference_names)

    async def get_room_by_id(self, room_id: str, *, expand_reference_names: bool = False) -> Any:
        return await self._get(r.ROOMS, room_id, expand_reference_names=expand_reference_names)

    # --- Subscriptions (webhooks) ---

    async def get_subscriptions(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.SUBSCRIPTIONS, filters, options)

    async def create_subscription(self, body: Any) -> Any:
        """Crea una suscripción (`name`, `target`, `resourceTypes`) y devuelve la creada."""
        return await self.dispatch(r.SUBSCRIPTIONS, Operation.CREATE, body=body)

    async def get_subscription_by_id(self, subscription_id: str) -> Any:
        return await self.dispatch(r.SUBSCRIPTIONS, Operation.GET, resource_id=subscription_id)

    async def update_subscription(self, subscription_id: str, body: Any) -> Any:
        """PATCH parcial; típicamente extiende `expires`."""
        return await self.dispatch(r.SUBSCRIPTIONS, Operation.UPDATE, resource_id=subscription_id, body=body)

    async def delete_subscription(self, subscription_id: str) -> None:
        await self.dispatch(r.SUBSCRIPTIONS, Operation.DELETE, resource_id=subscription_id)

    # --- Deleted entities / log / statistics ---

    async def get_deleted_entities(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        """Lo que consulta un receptor de webhooks cuando llega `deletedEntities`."""
        return await self._list(r.DELETED_ENTITIES, filters, options)

    async def get_log(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.LOG, filters, options)

    async def get_statistics(self, filters: Filters = None, options: QueryOptions | None = None) -> Any:
        return await self._list(r.STATISTICS, filters, options)


def _require(value: Any, name: str, spec: ResourceSpec, operation: Operation) -> None:
    if value is None or value == "":
        raise ValueError(f"'{name}' is required for {operation.value} on '{spec.name}'")
