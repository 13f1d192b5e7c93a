"""Worktime package.

Working-hours arithmetic for the agency task portal: remaining/overdue
working minutes, SLA deadlines and delay tracking, organized by feature
modules (calendars, leaves, working_time, sla, tasks) with a thin Flask
controller layer over service/repository layers.
"""
