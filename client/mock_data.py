"""Canned responses served by the client in development when the API is unreachable."""
from datetime import datetime, timedelta, timezone

MOCK_USER_ID = "user-dev-123"


def _iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


def projects():
    return [
        {
            "id": "proj-1",
            "name": "Website Redesign",
            "description": "Complete overhaul of the company website with modern design and improved user experience",
            "status": "active",
            "priority": "high",
            "progress": 65,
            "deadline": _iso(timedelta(days=14)),
            "manager": {"firstName": "Alex", "lastName": "Johnson"},
            "tasks": 12,
            "completedTasks": 8,
            "team": 5,
        },
        {
            "id": "proj-2",
            "name": "Mobile App Development",
            "description": "Creating a native mobile application for iOS and Android platforms",
            "status": "active",
            "priority": "medium",
            "progress": 40,
            "deadline": _iso(timedelta(days=30)),
            "manager": {"firstName": "Sarah", "lastName": "Miller"},
            "tasks": 20,
            "completedTasks": 8,
            "team": 4,
        },
        {
            "id": "proj-3",
            "name": "Marketing Campaign",
            "description": "Q4 digital marketing campaign across social media and email platforms",
            "status": "on_hold",
            "priority": "low",
            "progress": 20,
            "deadline": _iso(timedelta(days=45)),
            "manager": {"firstName": "Michael", "lastName": "Brown"},
            "tasks": 15,
            "completedTasks": 3,
            "team": 3,
        },
        {
            "id": "proj-4",
            "name": "Database Migration",
            "description": "Migrate legacy database to new cloud infrastructure with zero downtime",
            "status": "completed",
            "priority": "high",
            "progress": 100,
            "deadline": _iso(timedelta(days=-5)),
            "manager": {"firstName": "Emily", "lastName": "Davis"},
            "tasks": 18,
            "completedTasks": 18,
            "team": 6,
        },
    ]


def project(project_id: str):
    all_projects = projects()
    return next((p for p in all_projects if p["id"] == project_id), all_projects[0])


def tasks():
    ps = projects()
    rows = [
        ("task-1", "Design homepage wireframes", "Create wireframes for the new homepage design", "in_progress", "high", 3),
        ("task-2", "Implement user authentication", "Add login and registration functionality", "todo", "high", 5),
        ("task-3", "Create social media assets", "Design graphics for Facebook and Instagram campaign", "done", "medium", -2),
        ("task-4", "Test database migration script", "Run tests on the migration script in staging environment", "done", "high", -7),
    ]
    return [
        {
            "id": task_id,
            "title": title,
            "description": description,
            "status": status,
            "priority": priority,
            "dueDate": _iso(timedelta(days=days)),
            "projectId": p["id"],
            "projectName": p["name"],
            "assignedTo": {"firstName": "You", "lastName": ""},
        }
        for (task_id, title, description, status, priority, days), p in zip(rows, ps)
    ]


def project_tasks(project_id: str):
    return [t for t in tasks() if t["projectId"] == project_id]


def team_members():
    return [
        {"id": "user-1", "firstName": "Alex", "lastName": "Johnson", "email": "alex@example.com", "role": "admin", "profileImageUrl": None},
        {"id": "user-2", "firstName": "Sarah", "lastName": "Miller", "email": "sarah@example.com", "role": "member", "profileImageUrl": None},
        {"id": "user-3", "firstName": "Michael", "lastName": "Brown", "email": "michael@example.com", "role": "member", "profileImageUrl": None},
        {"id": MOCK_USER_ID, "firstName": "Dev", "lastName": "User", "email": "dev@example.com", "role": "admin", "profileImageUrl": None},
    ]


def notifications():
    return [
        {
            "id": "notif-1",
            "userId": MOCK_USER_ID,
            "type": "project_created",
            "title": "New Project Created",
            "message": "Website Redesign project has been created",
            "isRead": False,
            "createdAt": _iso(timedelta(minutes=-30)),
        },
        {
            "id": "notif-2",
            "userId": MOCK_USER_ID,
            "type": "task_assigned",
            "title": "Task Assigned",
            "message": "You have been assigned to 'Design homepage wireframes'",
            "isRead": False,
            "createdAt": _iso(timedelta(hours=-2)),
        },
        {
            "id": "notif-3",
            "userId": MOCK_USER_ID,
            "type": "comment_added",
            "title": "New Comment",
            "message": "Alex commented on 'Mobile App Development'",
            "isRead": True,
            "createdAt": _iso(timedelta(days=-1)),
        },
    ]


def analytics():
    return {
        "taskDistribution": {"todo": 5, "in_progress": 8, "done": 12},
        "projectStatus": {"active": 3, "on_hold": 1, "completed": 2},
        "taskPriority": {"high": 7, "medium": 10, "low": 8},
        "summary": {"totalProjects": 6, "totalTasks": 25, "completedTasks": 12, "completionRate": 48},
    }


def project_analytics():
    return [
        {
            "id": p["id"],
            "name": p["name"],
            "status": p["status"],
            "progress": p["progress"],
            "totalTasks": p["tasks"],
            "completedTasks": p["completedTasks"],
            "completionRate": p["completedTasks"] / p["tasks"] * 100,
        }
        for p in projects()
    ]


def task_analytics():
    result = []
    for p in projects():
        done = p["completedTasks"]
        open_tasks = p["tasks"] - done
        result.append({
            "projectId": p["id"],
            "projectName": p["name"],
            "totalTasks": p["tasks"],
            "statusDistribution": {"todo": open_tasks // 2, "in_progress": open_tasks - open_tasks // 2, "done": done},
            "priorityDistribution": {"high": p["tasks"] // 3, "medium": p["tasks"] // 3, "low": p["tasks"] - 2 * (p["tasks"] // 3)},
        })
    return result


def user():
    now = _iso(timedelta())
    return {
        "id": MOCK_USER_ID,
        "firstName": "Dev",
        "lastName": "User",
        "email": "dev@example.com",
        "profileImageUrl": None,
        "createdAt": now,
        "updatedAt": now,
    }
