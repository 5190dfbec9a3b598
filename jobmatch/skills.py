"""Skill dictionary: alias normalization, fuzzy skill matching and text extraction."""
from __future__ import annotations

import re
from typing import Iterable, NamedTuple


class SkillEntry(NamedTuple):
    canonical: str
    aliases: tuple[str, ...]
    category: str


SKILL_DICTIONARY: tuple[SkillEntry, ...] = (
    # Programming languages
    SkillEntry("JavaScript", ("js", "ecmascript", "es6", "es2015"), "Programming Languages"),
    SkillEntry("TypeScript", ("ts",), "Programming Languages"),
    SkillEntry("Python", ("py", "python3"), "Programming Languages"),
    SkillEntry("Java", ("jdk", "j2ee"), "Programming Languages"),
    SkillEntry("C#", ("csharp", "c sharp", ".net c#"), "Programming Languages"),
    SkillEntry("C++", ("cpp", "cplusplus"), "Programming Languages"),
    SkillEntry("Go", ("golang",), "Programming Languages"),
    SkillEntry("Rust", (), "Programming Languages"),
    SkillEntry("Swift", (), "Programming Languages"),
    SkillEntry("Kotlin", ("kt",), "Programming Languages"),
    SkillEntry("Ruby", ("rb",), "Programming Languages"),
    SkillEntry("PHP", ("php8", "php7"), "Programming Languages"),
    SkillEntry("Scala", (), "Programming Languages"),
    SkillEntry("R", ("r-lang", "rlang"), "Programming Languages"),
    SkillEntry("Dart", (), "Programming Languages"),
    SkillEntry("SQL", ("structured query language",), "Programming Languages"),
    # Frontend
    SkillEntry("React", ("reactjs", "react.js"), "Frontend"),
    SkillEntry("React Native", ("rn", "react-native"), "Frontend"),
    SkillEntry("Angular", ("angularjs", "angular.js", "ng"), "Frontend"),
    SkillEntry("Vue.js", ("vue", "vuejs"), "Frontend"),
    SkillEntry("Next.js", ("nextjs", "next"), "Frontend"),
    SkillEntry("Svelte", ("sveltekit",), "Frontend"),
    SkillEntry("HTML", ("html5",), "Frontend"),
    SkillEntry("CSS", ("css3", "stylesheet"), "Frontend"),
    SkillEntry("Tailwind CSS", ("tailwind", "tailwindcss"), "Frontend"),
    SkillEntry("Redux", ("redux toolkit", "rtk"), "Frontend"),
    SkillEntry("jQuery", ("jquery",), "Frontend"),
    # Backend
    SkillEntry("Node.js", ("node", "nodejs", "node.js"), "Backend"),
    SkillEntry("Express.js", ("express", "expressjs"), "Backend"),
    SkillEntry("Django", ("django rest", "drf"), "Backend"),
    SkillEntry("Flask", (), "Backend"),
    SkillEntry("FastAPI", ("fast api",), "Backend"),
    SkillEntry("Spring Boot", ("spring", "spring framework"), "Backend"),
    SkillEntry("ASP.NET", ("asp.net core", "dotnet", ".net"), "Backend"),
    SkillEntry("Ruby on Rails", ("rails", "ror"), "Backend"),
    SkillEntry("Laravel", (), "Backend"),
    SkillEntry("NestJS", ("nest.js", "nest"), "Backend"),
    SkillEntry("GraphQL", ("gql",), "Backend"),
    SkillEntry("REST API", ("restful", "rest apis", "api development"), "Backend"),
    # Databases
    SkillEntry("PostgreSQL", ("postgres", "psql", "pg"), "Databases"),
    SkillEntry("MySQL", ("mariadb",), "Databases"),
    SkillEntry("MongoDB", ("mongo", "nosql"), "Databases"),
    SkillEntry("Redis", (), "Databases"),
    SkillEntry("SQLite", ("sqlite3",), "Databases"),
    SkillEntry("Firebase", ("firestore",), "Databases"),
    SkillEntry("Supabase", (), "Databases"),
    SkillEntry("DynamoDB", ("dynamo",), "Databases"),
    SkillEntry("Elasticsearch", ("elastic", "es"), "Databases"),
    # Cloud & DevOps
    SkillEntry("AWS", ("amazon web services", "amazon aws"), "Cloud & DevOps"),
    SkillEntry("Azure", ("microsoft azure",), "Cloud & DevOps"),
    SkillEntry("GCP", ("google cloud", "google cloud platform"), "Cloud & DevOps"),
    SkillEntry("Docker", ("containerization", "docker compose"), "Cloud & DevOps"),
    SkillEntry("Kubernetes", ("k8s",), "Cloud & DevOps"),
    SkillEntry("CI/CD", ("continuous integration", "continuous deployment", "cicd"), "Cloud & DevOps"),
    SkillEntry("Terraform", ("iac", "infrastructure as code"), "Cloud & DevOps"),
    SkillEntry("Jenkins", (), "Cloud & DevOps"),
    SkillEntry("GitHub Actions", ("gh actions",), "Cloud & DevOps"),
    SkillEntry("Linux", ("unix", "bash", "shell scripting"), "Cloud & DevOps"),
    SkillEntry("Nginx", ("reverse proxy",), "Cloud & DevOps"),
    SkillEntry("Vercel", (), "Cloud & DevOps"),
    # Data & AI
    SkillEntry("Machine Learning", ("ml", "deep learning", "dl"), "Data & AI"),
    SkillEntry("TensorFlow", ("tf",), "Data & AI"),
    SkillEntry("PyTorch", ("torch",), "Data & AI"),
    SkillEntry("Pandas", (), "Data & AI"),
    SkillEntry("NumPy", ("numpy",), "Data & AI"),
    SkillEntry("Data Analysis", ("data analytics", "data science"), "Data & AI"),
    SkillEntry("NLP", ("natural language processing",), "Data & AI"),
    SkillEntry("Computer Vision", ("cv", "image recognition"), "Data & AI"),
    # Tools & methods
    SkillEntry("Git", ("github", "gitlab", "version control"), "Tools"),
    SkillEntry("Agile", ("scrum", "kanban", "sprint"), "Methods"),
    SkillEntry("Jira", ("atlassian",), "Tools"),
    SkillEntry("Figma", ("ui/ux design",), "Tools"),
    SkillEntry("Testing", ("unit testing", "jest", "mocha", "cypress", "selenium", "tdd"), "Tools"),
    SkillEntry("Webpack", ("bundler", "vite", "rollup"), "Tools"),
    # Soft skills
    SkillEntry("Leadership", ("team lead", "team management"), "Soft Skills"),
    SkillEntry("Communication", ("written communication", "verbal communication"), "Soft Skills"),
    SkillEntry("Problem Solving", ("analytical thinking", "critical thinking"), "Soft Skills"),
    SkillEntry("Project Management", ("pm", "project planning"), "Soft Skills"),
    SkillEntry("Teamwork", ("collaboration", "team player"), "Soft Skills"),
)

_LOOKUP: dict[str, str] = {}
for _entry in SKILL_DICTIONARY:
    _LOOKUP.setdefault(_entry.canonical.lower(), _entry.canonical)
    for _alias in _entry.aliases:
        _LOOKUP.setdefault(_alias.lower(), _entry.canonical)

# Vocabulary scanned in free-text titles and descriptions.
TECH_TERMS: tuple[str, ...] = (
    "JavaScript", "TypeScript", "Python", "Java", "C#", "C++", "Go", "Rust", "Swift", "Kotlin",
    "React", "Angular", "Vue", "Node.js", "Next.js", "Django", "Flask", "Spring", "Express",
    "Laravel", "AWS", "Azure", "GCP", "Docker", "Kubernetes", "SQL", "MongoDB", "PostgreSQL",
    "MySQL", "Redis", "Git", "CI/CD", "GraphQL", "Machine Learning", "AI", "Terraform",
    "Linux", "React Native", "Flutter", "iOS", "Android", "DevOps", "Figma", "HTML", "CSS",
    "PHP", "Ruby", ".NET", "Scala", "Power BI", "Sass", "Tailwind",
)


def _term_pattern(term: str) -> re.Pattern[str]:
    # Whole-token match: "Go" must not hit "good", "Java" must not hit "JavaScript"
    return re.compile(r"(?<![\w.+#])" + re.escape(term.lower()) + r"(?![\w+#])")


_TERM_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (term, _term_pattern(term)) for term in TECH_TERMS
)


def normalize_skill(raw: str) -> str:
    """Map an alias to its canonical name; unknown skills come back trimmed."""
    return _LOOKUP.get(raw.strip().lower(), raw.strip())


def find_skill_matches(
    user_skills: Iterable[str], job_skills: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Split *job_skills* into (matched, missing) against the user's skills.

    A job skill matches on canonical equality, or when either normalized form
    contains the other.
    """
    user_norm = [normalize_skill(s).lower() for s in user_skills if s and s.strip()]
    user_set = set(user_norm)
    matched: list[str] = []
    missing: list[str] = []
    for skill in job_skills:
        norm = normalize_skill(skill).lower()
        if norm in user_set or any(u in norm or norm in u for u in user_norm):
            matched.append(skill)
        else:
            missing.append(skill)
    return matched, missing


def extract_skills(*texts: str | None, limit: int = 15) -> list[str]:
    """Technology terms mentioned in the given texts, in vocabulary order."""
    haystack = " ".join(t for t in texts if t).lower()
    if not haystack:
        return []
    found = [term for term, pattern in _TERM_PATTERNS if pattern.search(haystack)]
    return found[:limit]


def clean_tags(tags: Iterable[str] | None, limit: int = 15) -> list[str]:
    """Keep short, non-trivial tag strings as skills."""
    out: list[str] = []
    for tag in tags or []:
        if isinstance(tag, str) and 1 < len(tag.strip()) < 30 and tag.strip() not in out:
            out.append(tag.strip())
    return out[:limit]
