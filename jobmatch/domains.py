"""Professional domain map used for query expansion and partial-credit skill scoring."""
from __future__ import annotations

from typing import Iterable, NamedTuple


class Domain(NamedTuple):
    id: str
    name: str
    triggers: tuple[str, ...]
    related_roles: tuple[str, ...]
    domain_keywords: tuple[str, ...]


DOMAIN_MAP: tuple[Domain, ...] = (
    # Tech
    Domain(
        "mobile-dev", "Mobile Development",
        ("flutter", "dart", "react native", "swift", "kotlin", "ios", "android", "mobile",
         "xamarin", "ionic", "cordova", "swiftui", "jetpack compose"),
        ("Mobile Developer", "Software Developer", "Application Developer",
         "Mobile Engineer", "Software Engineer", "App Developer"),
        ("mobile", "app", "ios", "android", "application", "software"),
    ),
    Domain(
        "frontend-dev", "Frontend Development",
        ("react", "angular", "vue.js", "vue", "svelte", "next.js", "html", "css",
         "tailwind css", "tailwind", "redux", "jquery", "frontend", "front-end", "front end",
         "ui developer", "gatsby", "nuxt", "webpack", "vite"),
        ("Frontend Developer", "UI Developer", "Web Developer",
         "Software Engineer", "Frontend Engineer", "JavaScript Developer"),
        ("frontend", "front-end", "ui", "web", "interface", "client-side", "javascript"),
    ),
    Domain(
        "backend-dev", "Backend Development",
        ("node.js", "express.js", "django", "flask", "fastapi", "spring boot", "asp.net",
         ".net", "ruby on rails", "laravel", "nestjs", "graphql", "rest api", "backend",
         "back-end", "back end", "microservices", "api development"),
        ("Backend Developer", "Software Engineer", "Server-Side Developer",
         "API Developer", "Backend Engineer", "Software Developer"),
        ("backend", "back-end", "server", "api", "microservices", "software"),
    ),
    Domain(
        "fullstack-dev", "Full Stack Development",
        ("full stack", "fullstack", "full-stack", "mern", "mean", "lamp"),
        ("Full Stack Developer", "Software Engineer", "Web Developer",
         "Full Stack Engineer", "Software Developer"),
        ("full stack", "fullstack", "full-stack", "web", "software"),
    ),
    Domain(
        "data-ai", "Data Science & AI",
        ("machine learning", "tensorflow", "pytorch", "pandas", "numpy", "data analysis",
         "data science", "data analytics", "nlp", "natural language processing",
         "computer vision", "deep learning", "scikit-learn", "keras", "jupyter",
         "statistics", "big data", "data engineering", "spark", "hadoop", "airflow"),
        ("Data Scientist", "Machine Learning Engineer", "AI Engineer",
         "Data Analyst", "Research Scientist", "Data Engineer"),
        ("data", "machine learning", "ai", "artificial intelligence", "analytics",
         "modeling", "science"),
    ),
    Domain(
        "devops-cloud", "DevOps & Cloud",
        ("aws", "azure", "gcp", "google cloud", "docker", "kubernetes", "terraform",
         "ci/cd", "jenkins", "github actions", "devops", "linux", "nginx", "ansible",
         "chef", "puppet", "cloudformation", "helm", "prometheus", "grafana"),
        ("DevOps Engineer", "Cloud Engineer", "Site Reliability Engineer",
         "Infrastructure Engineer", "Platform Engineer", "Systems Engineer"),
        ("devops", "cloud", "infrastructure", "deployment", "operations", "sre"),
    ),
    Domain(
        "database", "Database & Data Engineering",
        ("postgresql", "mysql", "mongodb", "redis", "elasticsearch", "dynamodb",
         "database", "sql", "cassandra", "neo4j", "oracle db", "sql server", "dba"),
        ("Database Administrator", "Data Engineer", "Database Developer",
         "Backend Developer", "Software Engineer"),
        ("database", "data engineering", "sql", "etl", "data pipeline"),
    ),
    Domain(
        "cybersecurity", "Cybersecurity",
        ("cybersecurity", "security", "penetration testing", "ethical hacking", "soc",
         "siem", "firewall", "vulnerability", "infosec", "information security",
         "network security"),
        ("Security Engineer", "Cybersecurity Analyst", "Security Consultant",
         "Information Security Analyst", "Penetration Tester"),
        ("security", "cybersecurity", "infosec", "threat", "compliance"),
    ),
    Domain(
        "qa-testing", "Quality Assurance",
        ("testing", "qa", "quality assurance", "selenium", "cypress", "jest", "mocha",
         "automation testing", "manual testing", "test engineer", "sdet"),
        ("QA Engineer", "Test Engineer", "SDET", "Quality Assurance Analyst",
         "Software Tester", "Automation Engineer"),
        ("testing", "qa", "quality", "automation", "test"),
    ),
    # Non-tech
    Domain(
        "healthcare", "Healthcare",
        ("anesthesia", "anesthesiology", "anesthesiologist", "nursing", "nurse", "medical",
         "clinical", "pharmacy", "pharmacist", "radiology", "surgery", "surgeon",
         "physician", "healthcare", "hospital", "patient care", "therapist", "therapy",
         "dentist", "dental", "optometry", "dermatology", "cardiology", "oncology",
         "pediatrics", "psychiatry", "veterinary", "paramedic", "emt", "phlebotomy"),
        ("Healthcare Professional", "Medical Officer", "Clinical Specialist",
         "Hospital Staff", "Health Services Professional", "Medical Practitioner"),
        ("medical", "clinical", "hospital", "healthcare", "patient", "health"),
    ),
    Domain(
        "finance", "Finance & Accounting",
        ("accounting", "finance", "auditing", "bookkeeping", "cpa", "financial analysis",
         "investment", "banking", "tax", "actuary", "actuarial", "portfolio", "trading",
         "fintech", "risk management", "compliance", "controller"),
        ("Financial Analyst", "Accountant", "Finance Manager",
         "Investment Analyst", "Banking Professional", "Auditor"),
        ("finance", "financial", "accounting", "banking", "investment", "fiscal"),
    ),
    Domain(
        "marketing", "Marketing & Communications",
        ("marketing", "seo", "content writing", "social media", "branding", "advertising",
         "pr", "public relations", "copywriting", "digital marketing", "sem", "ppc",
         "email marketing", "growth hacking", "content strategy", "analytics"),
        ("Marketing Manager", "Digital Marketer", "Content Strategist",
         "Marketing Specialist", "Brand Manager", "Growth Manager"),
        ("marketing", "brand", "advertising", "content", "campaign", "communications"),
    ),
    Domain(
        "design", "Design & Creative",
        ("figma", "ui/ux", "graphic design", "ux design", "ui design", "product design",
         "illustration", "adobe", "photoshop", "sketch", "interaction design",
         "visual design", "motion design", "user research", "wireframe", "prototype"),
        ("UX Designer", "UI Designer", "Product Designer",
         "Graphic Designer", "Visual Designer", "Interaction Designer"),
        ("design", "creative", "visual", "user experience", "ux", "ui"),
    ),
    Domain(
        "education", "Education & Training",
        ("teaching", "education", "curriculum", "instructor", "professor", "tutoring",
         "e-learning", "training", "academic", "lecturer", "pedagogy", "edtech"),
        ("Teacher", "Instructor", "Education Specialist",
         "Training Coordinator", "Curriculum Developer", "Academic Advisor"),
        ("education", "teaching", "academic", "learning", "training", "school"),
    ),
    Domain(
        "legal", "Legal",
        ("law", "legal", "attorney", "lawyer", "paralegal", "compliance", "litigation",
         "contract law", "corporate law", "intellectual property", "patent", "trademark"),
        ("Attorney", "Legal Counsel", "Paralegal",
         "Compliance Officer", "Legal Analyst", "Legal Advisor"),
        ("legal", "law", "compliance", "litigation", "regulatory"),
    ),
    Domain(
        "engineering-nonsoft", "Engineering (Non-Software)",
        ("mechanical engineering", "civil engineering", "electrical engineering",
         "chemical engineering", "structural", "cad", "autocad", "solidworks",
         "aerospace", "biomedical", "environmental engineering", "industrial engineering",
         "manufacturing", "robotics"),
        ("Mechanical Engineer", "Civil Engineer", "Electrical Engineer",
         "Project Engineer", "Design Engineer", "Process Engineer"),
        ("engineering", "technical", "design", "manufacturing", "construction"),
    ),
    Domain(
        "project-management", "Project & Product Management",
        ("project management", "product management", "scrum master", "agile", "pmp",
         "product owner", "program manager", "scrum", "kanban", "prince2",
         "delivery manager"),
        ("Project Manager", "Product Manager", "Program Manager",
         "Scrum Master", "Delivery Manager", "Technical Program Manager"),
        ("project", "product", "management", "delivery", "agile", "scrum"),
    ),
    Domain(
        "sales", "Sales & Business Development",
        ("sales", "business development", "account management", "crm", "salesforce",
         "lead generation", "b2b", "b2c", "revenue", "account executive", "partnerships"),
        ("Sales Manager", "Account Executive", "Business Development Manager",
         "Sales Representative", "Account Manager"),
        ("sales", "business", "revenue", "account", "client"),
    ),
    Domain(
        "hr", "Human Resources",
        ("human resources", "hr", "recruiting", "recruitment", "talent acquisition",
         "payroll", "employee relations", "onboarding", "compensation", "benefits", "hris"),
        ("HR Manager", "Recruiter", "Talent Acquisition Specialist",
         "HR Business Partner", "People Operations Manager"),
        ("hr", "human resources", "recruiting", "talent", "people"),
    ),
)

MAX_USER_DOMAINS = 3


def resolve_user_domains(headline: str | None, skills: Iterable[str]) -> list[Domain]:
    """Best-matching domains for a profile, most trigger hits first, at most three."""
    headline_lower = (headline or "").lower()
    skills_lower = [s.strip().lower() for s in skills if s and s.strip()]

    scored: list[tuple[Domain, int]] = []
    for domain in DOMAIN_MAP:
        hits = 0
        for trigger in domain.triggers:
            if trigger in headline_lower:
                hits += 1
            if any(s == trigger or trigger in s or s in trigger for s in skills_lower):
                hits += 1
        if hits:
            scored.append((domain, hits))

    # sorted() is stable, so table order breaks ties
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [domain for domain, _ in scored[:MAX_USER_DOMAINS]]


def _dedupe_casefold(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        key = value.lower()
        if key not in seen:
            seen.add(key)
            out.append(value)
    return out


def expanded_roles(domains: Iterable[Domain]) -> list[str]:
    return _dedupe_casefold(role for d in domains for role in d.related_roles)


def domain_keywords(domains: Iterable[Domain]) -> list[str]:
    return _dedupe_casefold(kw for d in domains for kw in d.domain_keywords)
