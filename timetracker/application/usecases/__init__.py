"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
├── resources/      # CRUD owner-scoped sobre OwnedResourceService
├── time_entries/   # Timers: start/stop, duración, consultas por rango
└── account/        # Registro, login, passwords, verificación de email

Usage
-----
Importar desde los subpaquetes:

    from timetracker.application.usecases.resources import ProjectService
    from timetracker.application.usecases.account import RegisterUserUseCase
"""
