from bs4.element import Tag


class RequestResponse:
    def __init__(self, text: str, xml: Tag):
        """
        text - raw response body, used to build diagnostics when a field is unusable
        xml - the <ActionName>Response element found in the envelope Body
        """

        self.text = text
        self.xml = xml

    def field(self, name: str):
        """
        Returns text of the named child of the success element,
            "" if it is present but empty, None if it is missing
        """

        child = self.xml.find(name, recursive=False)
        if child is None:
            return None
        return child.get_text()

    def __repr__(self) -> str:
        return f"RequestResponse(xml={self.xml.name})"
