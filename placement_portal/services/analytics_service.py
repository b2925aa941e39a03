"""
Analytics Service - read-only rollups for the admin dashboard.

Everything here is a MongoDB aggregation pipeline over the stored
collections; nothing is cached or precomputed.
"""

from typing import Optional

from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.schemas.schemas import CurrentUser
from placement_portal.services.mongo_service import ensure_role

TOP_N = 10


def _counts_by(collection, field: str, match: Optional[dict] = None) -> dict:
    """{value: count} for a single group-by field."""
    pipeline = []
    if match:
        pipeline.append({"$match": match})
    pipeline.append({"$group": {"_id": f"${field}", "count": {"$sum": 1}}})
    return {item["_id"]: item["count"] for item in collection.aggregate(pipeline)}


def _stage_list(stages: list) -> list:
    return sorted(stages, key=lambda s: s["stage"])


class AnalyticsService:
    """Admin statistics over users, jobs and applications."""

    def __init__(self):
        self.users = get_collection(COLLECTIONS["users"])
        self.jobs = get_collection(COLLECTIONS["jobs"])
        self.applications = get_collection(COLLECTIONS["applications"])
        self.profiles = get_collection(COLLECTIONS["profiles"])

    def user_stats(self, actor: CurrentUser) -> dict:
        """Active users, total and per role."""
        ensure_role(actor, "admin")
        return {
            "total": self.users.count_documents({"is_active": True}),
            "by_role": _counts_by(self.users, "role", {"is_active": True})
        }

    def job_stats(self, actor: CurrentUser) -> dict:
        """Job counts, the placement funnel, skill demand and top companies."""
        ensure_role(actor, "admin")

        total_applications = self.applications.count_documents({})
        funnel = _counts_by(self.applications, "stage")
        placement_rate = (
            round(funnel.get("offered", 0) / total_applications * 100)
            if total_applications else 0
        )

        skills_demand = self.jobs.aggregate([
            {"$match": {"status": "open"}},
            {"$unwind": "$skills"},
            {"$group": {"_id": "$skills", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
            {"$limit": TOP_N}
        ])

        company_stats = self.jobs.aggregate([
            {"$lookup": {
                "from": COLLECTIONS["users"],
                "localField": "company_id",
                "foreignField": "_id",
                "as": "owner"
            }},
            {"$unwind": "$owner"},
            {"$group": {"_id": "$owner.company_name", "job_count": {"$sum": 1}}},
            {"$sort": {"job_count": -1}},
            {"$limit": TOP_N}
        ])

        return {
            "total": self.jobs.count_documents({}),
            "active": self.jobs.count_documents({"status": "open"}),
            "by_status": _counts_by(self.jobs, "status"),
            "applications": total_applications,
            "placement_rate": placement_rate,
            "funnel": funnel,
            "skills_demand": [{"skill": s["_id"], "count": s["count"]} for s in skills_demand],
            "company_stats": [
                {"company_name": c["_id"], "job_count": c["job_count"]} for c in company_stats
            ]
        }

    def placement_analytics(
        self,
        actor: CurrentUser,
        batch: Optional[int] = None,
        department: Optional[str] = None
    ) -> dict:
        """
        Funnel for one graduation batch and/or department, plus stage counts
        for every department.
        """
        ensure_role(actor, "admin")

        match = {}
        if batch:
            student_ids = [p["user_id"] for p in self.profiles.find({"graduation_year": batch}, {"user_id": 1})]
            match["student_id"] = {"$in": student_ids}

        pipeline = [
            {"$match": match},
            {"$lookup": {
                "from": COLLECTIONS["users"],
                "localField": "student_id",
                "foreignField": "_id",
                "as": "student"
            }},
            {"$unwind": "$student"}
        ]
        if department:
            pipeline.append({"$match": {"student.department": department}})
        pipeline += [
            {"$group": {"_id": "$stage", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}}
        ]
        funnel = [{"stage": f["_id"], "count": f["count"]} for f in self.applications.aggregate(pipeline)]

        department_rows = self.applications.aggregate([
            {"$lookup": {
                "from": COLLECTIONS["users"],
                "localField": "student_id",
                "foreignField": "_id",
                "as": "student"
            }},
            {"$unwind": "$student"},
            {"$group": {
                "_id": {"department": "$student.department", "stage": "$stage"},
                "count": {"$sum": 1}
            }}
        ])
        departments = {}
        for row in department_rows:
            name = row["_id"].get("department")
            departments.setdefault(name, []).append({"stage": row["_id"]["stage"], "count": row["count"]})

        return {
            "placement_funnel": funnel,
            "department_stats": [
                {"department": name, "stages": _stage_list(stages)}
                for name, stages in sorted(departments.items(), key=lambda d: d[0] or "")
            ]
        }

    def company_analytics(self, actor: CurrentUser) -> dict:
        """Applications received per company, split by stage, busiest first."""
        ensure_role(actor, "admin")

        rows = self.applications.aggregate([
            {"$lookup": {
                "from": COLLECTIONS["jobs"],
                "localField": "job_id",
                "foreignField": "_id",
                "as": "job"
            }},
            {"$unwind": "$job"},
            {"$group": {
                "_id": {"company_id": "$job.company_id", "stage": "$stage"},
                "count": {"$sum": 1}
            }}
        ])

        companies = {}
        for row in rows:
            company_id = row["_id"]["company_id"]
            entry = companies.setdefault(company_id, {"stages": [], "total_applications": 0})
            entry["stages"].append({"stage": row["_id"]["stage"], "count": row["count"]})
            entry["total_applications"] += row["count"]

        names = {
            u["_id"]: u.get("company_name")
            for u in self.users.find({"_id": {"$in": list(companies)}}, {"company_name": 1})
        }

        stats = [
            {
                "company_id": str(company_id),
                "company_name": names.get(company_id),
                "stages": _stage_list(entry["stages"]),
                "total_applications": entry["total_applications"]
            }
            for company_id, entry in companies.items()
        ]
        stats.sort(key=lambda s: s["total_applications"], reverse=True)
        return {"company_stats": stats}
