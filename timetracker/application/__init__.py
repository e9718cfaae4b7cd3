"""
Application Layer (casos de uso)

Orquesta dominio + puertos:
    - usecases/resources     CRUD owner-scoped (Client, Project, Task, Tag, TimerPreset)
    - usecases/time_entries  máquina de estados de timers
    - usecases/account       registro, login, passwords, verificación, perfil
    - provisioning           defaults de cuenta nueva (idempotente)
"""
