"""UI / CSV header labels in English and Chinese."""
from __future__ import annotations

from typing import Dict

LANGUAGES = ("zh", "en")
DEFAULT_LANGUAGE = "zh"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "appTitle": "NRE Task Tracker",
        "taskList": "Task List",
        "dashboard": "Dashboard",
        "importExport": "Import / Export",
        "settings": "Settings",
        "newTask": "New Task",
        "editTask": "Edit Task",
        "save": "Save",
        "cancel": "Cancel",
        "delete": "Delete",
        "confirmDelete": "Are you sure you want to delete this task?",
        "searchPlaceholder": "Search by name or NRE #",
        "allOwners": "All Owners",
        "allDevices": "All Devices",
        "allStatuses": "All Statuses",
        "noTasks": "No tasks found",
        "overdue": "Overdue {days} days",
        "taskName": "Task Name",
        "taskType": "Task Type",
        "owner": "Owner",
        "deviceType": "Device Type",
        "platform": "Platform",
        "androidVersion": "Android Version",
        "nreNumber": "NRE #",
        "status": "Status",
        "startDate": "Start Date",
        "endDate": "End Date",
        "workHours": "Work Hours",
        "content": "Content",
        "statusDist": "Status Distribution",
        "ownerDist": "Tasks by Owner",
        "workHoursByOwnerDevice": "Work Hours by Owner & Device",
        "workHoursDist": "Work Hours Distribution",
        "byTaskType": "By Task Type",
        "byDeviceType": "By Device Type",
        "exportTasks": "Export Tasks",
        "exportCriteria": "Export criteria",
        "byYear": "By Year",
        "byOwner": "By Owner",
        "selectYear": "Select year",
        "selectOwner": "Select owner",
        "export": "Export",
        "importTasks": "Import Tasks",
        "importSuccess": "Imported {count} tasks",
        "importFailed": "Import failed",
        "connectionError": "Connection Error",
        "retryConnection": "Retry Connection",
        "saveError": "Error saving to database",
        "kpiTasks": "Tasks",
        "kpiOverdue": "Overdue",
        "data": "Data",
        "skippedRows": "Skipped {count} malformed rows",
        "dropdownOptions": "Dropdown options",
        "server": "Server",
        "port": "Port",
        "portSaved": "Port saved. Restart the server to apply it.",
        "shareLink": "LAN link",
        "shareLinkHelp": "Open this address from another device on the same network.",
        "apiAddress": "API address",
    },
    "zh": {
        "appTitle": "NRE 任务管理",
        "taskList": "任务列表",
        "dashboard": "数据看板",
        "importExport": "导入 / 导出",
        "settings": "设置",
        "newTask": "新建任务",
        "editTask": "编辑任务",
        "save": "保存",
        "cancel": "取消",
        "delete": "删除",
        "confirmDelete": "确定要删除该任务吗？",
        "searchPlaceholder": "按名称或 NRE 编号搜索",
        "allOwners": "全部负责人",
        "allDevices": "全部机型",
        "allStatuses": "全部状态",
        "noTasks": "暂无任务",
        "overdue": "已逾期 {days} 天",
        "taskName": "任务名称",
        "taskType": "任务类型",
        "owner": "负责人",
        "deviceType": "机型",
        "platform": "平台",
        "androidVersion": "安卓版本",
        "nreNumber": "NRE 编号",
        "status": "状态",
        "startDate": "开始日期",
        "endDate": "结束日期",
        "workHours": "工时",
        "content": "内容",
        "statusDist": "状态分布",
        "ownerDist": "负责人任务数",
        "workHoursByOwnerDevice": "负责人 / 机型工时",
        "workHoursDist": "工时分布",
        "byTaskType": "按任务类型",
        "byDeviceType": "按机型",
        "exportTasks": "导出任务",
        "exportCriteria": "导出条件",
        "byYear": "按年份",
        "byOwner": "按负责人",
        "selectYear": "选择年份",
        "selectOwner": "选择负责人",
        "export": "导出",
        "importTasks": "导入任务",
        "importSuccess": "成功导入 {count} 条任务",
        "importFailed": "导入失败",
        "connectionError": "连接错误",
        "retryConnection": "重试连接",
        "saveError": "保存到数据库时出错",
        "kpiTasks": "任务总数",
        "kpiOverdue": "已逾期",
        "data": "数据",
        "skippedRows": "已跳过 {count} 行格式错误的数据",
        "dropdownOptions": "下拉选项",
        "server": "服务器",
        "port": "端口",
        "portSaved": "端口已保存，重启服务器后生效。",
        "shareLink": "局域网访问地址",
        "shareLinkHelp": "同一网络中的其他设备可通过此地址打开本页面。",
        "apiAddress": "API 地址",
    },
}


def labels(lang: str = DEFAULT_LANGUAGE) -> Dict[str, str]:
    return TRANSLATIONS.get(lang, TRANSLATIONS[DEFAULT_LANGUAGE])


def tr(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs: object) -> str:
    text = labels(lang).get(key, key)
    for k, v in kwargs.items():
        text = text.replace("{" + k + "}", str(v))
    return text
