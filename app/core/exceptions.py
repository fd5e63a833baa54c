"""Domain exceptions raised by the service layer."""


class SurveyNotFoundError(LookupError):
    """No survey exists for the requested id."""

    def __init__(self, survey_id: int):
        self.survey_id = survey_id
        super().__init__(f"Survey not found with id: {survey_id}")
