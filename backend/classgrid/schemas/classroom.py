from pydantic import BaseModel, Field, field_validator, model_validator


class SubjectAssignment(BaseModel):
    subject_name: str = Field(alias="subjectName", min_length=1, max_length=200)
    teacher_name: str | None = Field(default=None, alias="teacherName", max_length=200)

    model_config = {"populate_by_name": True}

    @field_validator("subject_name")
    @classmethod
    def normalize_subject_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Subject name cannot be empty")
        return trimmed


class ClassroomCreate(BaseModel):
    name: str = Field(alias="className", min_length=1, max_length=100)
    division: str | None = Field(default=None, max_length=20)
    class_teacher: str | None = Field(default=None, alias="classTeacher", max_length=200)
    subjects: list[SubjectAssignment] = Field(default_factory=list, max_length=50)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_unique_subjects(self) -> "ClassroomCreate":
        seen: set[str] = set()
        duplicates: set[str] = set()
        for item in self.subjects:
            if item.subject_name in seen:
                duplicates.add(item.subject_name)
            else:
                seen.add(item.subject_name)
        if duplicates:
            raise ValueError(f"Duplicate subject(s): {', '.join(sorted(duplicates))}")
        return self


class ClassroomOut(BaseModel):
    class_id: str = Field(alias="classId")
    school_id: str = Field(alias="schoolId")
    name: str = Field(alias="className")
    division: str | None = None
    class_teacher: str | None = Field(default=None, alias="classTeacher")
    subjects: list[SubjectAssignment] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ClassroomListOut(BaseModel):
    school_id: str = Field(alias="schoolId")
    classes: list[ClassroomOut] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SubjectListOut(BaseModel):
    class_id: str = Field(alias="classId")
    subjects: list[SubjectAssignment] = Field(default_factory=list)

    model_config = {"populate_by_name": True}
