class StateKeys:
    """Keys for engine data stored in ``st.session_state``."""

    AUDIT_ISSUES = "data.audit_issues"
    AUDIT_DISMISSED = "data.audit_dismissed"
    DRAFTS = "drafts"
    SUBMIT_FEEDBACK = "submit_feedback"


class ProfileFields:
    """Field names on the student profile record."""

    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    DATE_OF_BIRTH = "dateOfBirth"
    GENDER = "gender"
    EMAIL = "email"
    NATIONALITY = "nationality"
    PHONE_NUMBER = "phoneNumber"
    SECONDARY_NUMBER = "secondaryNumber"
    PASSPORT_NUMBER = "passportNumber"
    CITY = "city"
    COUNTRY = "country"
    ADDRESS = "address"

    HIGHEST_QUALIFICATION = "highestQualification"
    HIGHEST_INSTITUTION = "highestInstitution"
    HIGHEST_COUNTRY = "highestCountry"
    HIGHEST_GPA = "highestGpa"
    GRADUATION_YEAR = "graduationYear"
    ACADEMIC_GAP = "currentAcademicGap"

    INTERESTED_COURSE = "interestedCourse"
    FIELD_OF_STUDY = "fieldOfStudy"
    PREFERRED_INTAKE = "preferredIntake"
    BUDGET_RANGE = "budgetRange"
    INTERESTED_SERVICES = "interestedServices"
    PART_TIME_INTEREST = "partTimeInterest"
    ACCOMMODATION_REQUIRED = "accommodationRequired"
    HAS_DEPENDENTS = "hasDependents"

    FUNDING_SOURCE = "fundingSource"
    ESTIMATED_BUDGET = "estimatedBudget"
    SAVINGS_AMOUNT = "savingsAmount"
    LOAN_APPROVAL = "loanApproval"
    LOAN_AMOUNT = "loanAmount"
    SPONSOR_DETAILS = "sponsorDetails"
    FINANCIAL_DOCUMENTS = "financialDocuments"

    PREFERRED_COUNTRIES = "preferredCountries"

    EMPLOYMENT_STATUS = "currentEmploymentStatus"
    WORK_EXPERIENCE_YEARS = "workExperienceYears"
    JOB_TITLE = "jobTitle"
    ORGANIZATION_NAME = "organizationName"
    FIELD_OF_WORK = "fieldOfWork"
    GAP_REASON = "gapReasonIfAny"

    ENGLISH_TESTS = "englishProficiencyTests"
    STANDARDIZED_TESTS = "standardizedTests"


class ScholarshipFields:
    """Field names on the scholarship listing record."""

    SCHOLARSHIP_ID = "scholarshipId"
    SCHOLARSHIP_NAME = "scholarshipName"
    PROVIDER_NAME = "providerName"
    PROVIDER_TYPE = "providerType"
    PROVIDER_COUNTRY = "providerCountry"
    DESCRIPTION = "description"
    SHORT_DESCRIPTION = "shortDescription"

    APPLICATION_URL = "applicationUrl"
    APPLICATION_DEADLINE = "applicationDeadline"

    STUDY_LEVEL = "studyLevel"
    FIELD_CATEGORY = "fieldCategory"
    TARGET_COUNTRIES = "targetCountries"

    FUNDING_TYPE = "fundingType"
    FUNDING_AMOUNT = "fundingAmount"
    FUNDING_CURRENCY = "fundingCurrency"
    TOTAL_VALUE_MIN = "totalValueMin"
    TOTAL_VALUE_MAX = "totalValueMax"

    ELIGIBILITY_REQUIREMENTS = "eligibilityRequirements"
    LANGUAGE_REQUIREMENTS = "languageRequirements"
    MIN_AGE = "minAge"
    MAX_AGE = "maxAge"
    MIN_GPA = "minGpa"

    DIFFICULTY_LEVEL = "difficultyLevel"
    DATA_SOURCE = "dataSource"
    VERIFIED = "verified"
    STATUS = "status"
