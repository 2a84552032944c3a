"""Message catalogs for the supported locales.

Each catalog is a nested dict addressed by dotted keys ("nav.dashboard").
Placeholders use {name}; plurals use {name, plural, one {...} other {...}}.
"""

from __future__ import annotations

EN: dict = {
    "nav": {
        "dashboard": "Dashboard",
        "events": "Events",
        "tracks": "Tracks",
        "tasks": "Tasks",
        "meetings": "Meetings",
        "settings": "Settings",
    },
    "header": {
        "search": "Search...",
        "notifications": "Notifications",
        "userMenu": "User menu",
        "toggleMenu": "Toggle menu",
        "changeLanguage": "Change language",
    },
    "dashboard": {
        "title": "Dashboard",
        "welcome": "Welcome back",
        "activeTasks": "{count} {count, plural, one {active task} other {active tasks}}",
        "overdueTasks": "{count} {count, plural, one {task} other {tasks}} overdue",
        "unknownUser": "Unknown user",
    },
    "time": {
        "lessThanMinute": "less than a minute ago",
        "minutesAgo": "{count} {count, plural, one {minute} other {minutes}} ago",
        "hoursAgo": "{count} {count, plural, one {hour} other {hours}} ago",
        "daysAgo": "{count} {count, plural, one {day} other {days}} ago",
    },
    "meetings": {
        "hasNotes": "Notes available",
        "noNotes": "No notes yet",
        "unknownAttendee": "Unknown attendee",
    },
    "common": {
        "loading": "Loading...",
        "save": "Save",
        "cancel": "Cancel",
        "delete": "Delete",
        "edit": "Edit",
        "close": "Close",
        "back": "Back",
        "confirm": "Confirm",
    },
}

ES: dict = {
    "nav": {
        "dashboard": "Panel",
        "events": "Eventos",
        "tracks": "Áreas",
        "tasks": "Tareas",
        "meetings": "Reuniones",
        "settings": "Configuración",
    },
    "header": {
        "search": "Buscar...",
        "notifications": "Notificaciones",
        "userMenu": "Menú de usuario",
        "toggleMenu": "Alternar menú",
        "changeLanguage": "Cambiar idioma",
    },
    "dashboard": {
        "title": "Panel",
        "welcome": "Bienvenido de nuevo",
        "activeTasks": "{count} {count, plural, one {tarea activa} other {tareas activas}}",
        "overdueTasks": "{count} {count, plural, one {tarea vencida} other {tareas vencidas}}",
        "unknownUser": "Usuario desconocido",
    },
    "time": {
        "lessThanMinute": "hace menos de un minuto",
        "minutesAgo": "hace {count} {count, plural, one {minuto} other {minutos}}",
        "hoursAgo": "hace {count} {count, plural, one {hora} other {horas}}",
        "daysAgo": "hace {count} {count, plural, one {día} other {días}}",
    },
    "meetings": {
        "hasNotes": "Notas disponibles",
        "noNotes": "Sin notas todavía",
        "unknownAttendee": "Asistente desconocido",
    },
    "common": {
        "loading": "Cargando...",
        "save": "Guardar",
        "cancel": "Cancelar",
        "delete": "Eliminar",
        "edit": "Editar",
        "close": "Cerrar",
        "back": "Atrás",
        "confirm": "Confirmar",
    },
}

KO: dict = {
    "nav": {
        "dashboard": "대시보드",
        "events": "이벤트",
        "tracks": "트랙",
        "tasks": "작업",
        "meetings": "회의",
        "settings": "설정",
    },
    "header": {
        "search": "검색...",
        "notifications": "알림",
        "userMenu": "사용자 메뉴",
        "toggleMenu": "메뉴 전환",
        "changeLanguage": "언어 변경",
    },
    "dashboard": {
        "title": "대시보드",
        "welcome": "다시 오신 것을 환영합니다",
        "activeTasks": "진행 중인 작업 {count}개",
        "overdueTasks": "기한이 지난 작업 {count}개",
        "unknownUser": "알 수 없는 사용자",
    },
    "time": {
        "lessThanMinute": "방금 전",
        "minutesAgo": "{count}분 전",
        "hoursAgo": "{count}시간 전",
        "daysAgo": "{count}일 전",
    },
    "meetings": {
        "hasNotes": "메모 있음",
        "noNotes": "아직 메모가 없습니다",
        "unknownAttendee": "알 수 없는 참석자",
    },
    "common": {
        "loading": "로딩 중...",
        "save": "저장",
        "cancel": "취소",
        "delete": "삭제",
        "edit": "편집",
        "close": "닫기",
        "back": "뒤로",
        "confirm": "확인",
    },
}

CATALOGS: dict[str, dict] = {"en": EN, "es": ES, "ko": KO}
